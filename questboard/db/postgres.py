"""PostgreSQL event store backed by a psycopg connection pool."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import psycopg
from psycopg import errors as pg_errors
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from questboard.config import PostgresSettings
from questboard.db.core import EVENT_ID_ATTEMPTS, generate_event_id
from questboard.db.migrations import run_migrations
from questboard.db.records import EventRecord, ParticipantAvailability
from questboard.errors import DatabaseError

_logger = logging.getLogger(__name__)


class PostgresEventStore:
    def __init__(self, settings: PostgresSettings, id_length: int = 10) -> None:
        self._settings = settings
        self._id_length = id_length
        self._pool: AsyncConnectionPool | None = None

    async def open(self) -> None:
        if self._pool is not None:
            return
        settings = self._settings
        self._pool = AsyncConnectionPool(
            settings.get_dsn(),
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            timeout=settings.pool_timeout,
            max_lifetime=settings.pool_max_lifetime,
            max_idle=settings.pool_max_idle,
            check=AsyncConnectionPool.check_connection,
            open=False,
        )
        await self._pool.open()
        _logger.info(
            "Database connection pool initialized (min=%d, max=%d, timeout=%ds)",
            settings.pool_min_size,
            settings.pool_max_size,
            settings.pool_timeout,
        )
        async with self.connection() as conn:
            await run_migrations(conn)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            _logger.info("Database connection pool closed")

    @asynccontextmanager
    async def connection(self):
        if self._pool is None:
            raise DatabaseError(detail="Database pool is not open")
        try:
            async with self._pool.connection() as conn:
                await conn.set_autocommit(True)
                yield conn
        except psycopg.Error as e:
            _logger.exception("Database operation failed")
            raise DatabaseError(detail=str(e)) from e

    async def ping(self) -> bool:
        try:
            async with self.connection() as conn:
                await conn.execute("SELECT 1")
            return True
        except DatabaseError:
            return False

    async def create_event(
        self,
        name: str,
        description: str,
        dates: list[str],
        start_hour: int,
        end_hour: int,
    ) -> EventRecord:
        now = datetime.now(UTC)
        async with self.connection() as conn:
            for _ in range(EVENT_ID_ATTEMPTS):
                event_id = generate_event_id(self._id_length)
                try:
                    await conn.execute(
                        """INSERT INTO events (id, name, description, dates, start_hour, end_hour, created_at)
                           VALUES (%s, %s, %s, %s, %s, %s, %s)""",
                        (event_id, name, description, Json(dates), start_hour, end_hour, now),
                    )
                except pg_errors.UniqueViolation:
                    _logger.info("Event id collision on %s, retrying", event_id)
                    continue
                return EventRecord(
                    id=event_id,
                    name=name,
                    description=description,
                    dates=dates,
                    start_hour=start_hour,
                    end_hour=end_hour,
                    created_at=now,
                )
        raise DatabaseError(detail="Failed to generate unique event ID")

    async def get_event(self, event_id: str) -> EventRecord | None:
        async with self.connection() as conn:
            cur = await conn.execute(
                """SELECT id, name, description, dates, start_hour, end_hour, created_at
                   FROM events WHERE id = %s""",
                (event_id,),
            )
            row = await cur.fetchone()
        if not row:
            return None
        return EventRecord(
            id=row[0],
            name=row[1],
            description=row[2] or "",
            dates=row[3],
            start_hour=row[4],
            end_hour=row[5],
            created_at=row[6].astimezone(UTC),
        )

    async def get_availability(self, event_id: str) -> ParticipantAvailability:
        result: ParticipantAvailability = {}
        async with self.connection() as conn:
            cur = await conn.execute(
                """SELECT p.name, a.slot_key, a.note
                   FROM participants p
                   LEFT JOIN availability a
                     ON a.event_id = p.event_id AND a.participant_name = p.name
                   WHERE p.event_id = %s
                   ORDER BY p.id, a.id""",
                (event_id,),
            )
            async for name, slot_key, note in cur:
                slots = result.setdefault(name, {})
                if slot_key is not None:
                    slots[slot_key] = note or ""
        return result

    async def replace_availability(
        self,
        event_id: str,
        participant_name: str,
        slots: dict[str, str],
    ) -> datetime:
        now = datetime.now(UTC)
        async with self.connection() as conn:
            async with conn.transaction():
                await conn.execute(
                    """INSERT INTO participants (event_id, name, created_at, updated_at)
                       VALUES (%s, %s, %s, %s)
                       ON CONFLICT (event_id, name) DO UPDATE SET updated_at = EXCLUDED.updated_at""",
                    (event_id, participant_name, now, now),
                )
                await conn.execute(
                    "DELETE FROM availability WHERE event_id = %s AND participant_name = %s",
                    (event_id, participant_name),
                )
                if slots:
                    async with conn.cursor() as cur:
                        await cur.executemany(
                            """INSERT INTO availability (event_id, participant_name, slot_key, note, created_at)
                               VALUES (%s, %s, %s, %s, %s)""",
                            [(event_id, participant_name, key, note, now) for key, note in slots.items()],
                        )
        return now
