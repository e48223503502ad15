"""Database migrations module.

Migrations are versioned SQL files in this directory (``001_initial_schema.sql``)
applied in order. The applied version is recorded in ``schema_migrations``.
"""

import logging
from pathlib import Path
from typing import Any

import psycopg

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_CREATE_MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    description TEXT
);
"""


async def get_current_version(conn: psycopg.AsyncConnection) -> int:
    """Get the current migration version from the database."""
    await conn.execute(_CREATE_MIGRATIONS_TABLE)
    cur = await conn.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
    row = await cur.fetchone()
    return int(row[0]) if row and row[0] else 0


def list_migrations(directory: Path = MIGRATIONS_DIR) -> list[dict[str, Any]]:
    """All migration files, ordered by version.

    Files whose name does not start with a version number are skipped.
    """
    migrations = []
    for path in sorted(directory.glob("*.sql")):
        head, _, rest = path.stem.partition("_")
        try:
            version = int(head)
        except ValueError:
            continue
        migrations.append({
            "version": version,
            "filename": path.name,
            "description": rest,
            "path": path,
        })
    return sorted(migrations, key=lambda m: m["version"])


async def apply_migration(
    conn: psycopg.AsyncConnection,
    version: int,
    sql: str,
    description: str = "",
) -> None:
    """Apply a single migration and record it, atomically."""
    async with conn.transaction():
        await conn.execute(sql)
        await conn.execute(
            "INSERT INTO schema_migrations (version, description) VALUES (%s, %s)",
            (version, description),
        )
    logger.info("Applied migration %d: %s", version, description)


async def run_migrations(conn: psycopg.AsyncConnection, directory: Path = MIGRATIONS_DIR) -> int:
    """Run all pending migrations.

    Returns:
        Number of migrations applied.
    """
    current = await get_current_version(conn)
    applied = 0
    for migration in list_migrations(directory):
        if migration["version"] <= current:
            continue
        try:
            await apply_migration(
                conn,
                migration["version"],
                migration["path"].read_text(),
                migration["description"],
            )
        except psycopg.Error as e:
            logger.error("Failed to apply migration %d: %s", migration["version"], e)
            raise
        applied += 1

    if applied:
        logger.info("Schema updated from version %d, applied %d migrations", current, applied)
    else:
        logger.debug("Schema is up to date at version %d", current)
    return applied
