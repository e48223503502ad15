"""Application startup and shutdown.

Builds the event store and the optional Redis view cache once per process
and hangs them on ``app.state`` for the dependencies in
``questboard.dependencies``.
"""

import logging
from dataclasses import dataclass

import redis.asyncio as redis
from redis.asyncio import BlockingConnectionPool as RedisConnectionPool

from questboard.cache import EventViewCache
from questboard.config import Settings
from questboard.db import EventStore, build_store

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    store: EventStore | None = None
    cache: EventViewCache | None = None


def init_redis(settings: Settings) -> redis.Redis:
    """Create a Redis client backed by a blocking connection pool."""
    redis_pool = RedisConnectionPool(
        host=settings.redis.host,
        port=settings.redis.port,
        password=settings.redis.password if settings.redis.password else None,
        max_connections=settings.redis.max_connections,
        timeout=settings.redis.pool_timeout_sec,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_connect_timeout,
    )
    return redis.Redis(connection_pool=redis_pool, decode_responses=True)


def init_cache(settings: Settings) -> EventViewCache | None:
    """Build the view cache, or None if caching is disabled."""
    if not settings.cache.enabled:
        return None
    if settings.debug.cache:
        logging.getLogger("questboard.cache").setLevel(logging.DEBUG)
    return EventViewCache(
        init_redis(settings),
        ttl_sec=settings.cache.ttl_sec,
        key_prefix=settings.cache.key_prefix,
    )


async def setup_resources(settings: Settings) -> LifespanResources:
    """Open the store and cache.

    A store that fails to open aborts startup.
    """
    resources = LifespanResources()
    store = build_store(settings)
    await store.open()
    resources.store = store
    logger.info("Event store ready (backend=%s)", settings.store.backend)

    resources.cache = init_cache(settings)
    if resources.cache is not None:
        logger.info("Event view cache enabled (ttl=%ds)", settings.cache.ttl_sec)
    return resources


async def cleanup_resources(resources: LifespanResources) -> None:
    """Close everything opened by ``setup_resources``."""
    if resources.cache is not None:
        try:
            await resources.cache.close()
        except Exception as e:
            logger.warning("Failed to close view cache: %s", e)
        resources.cache = None

    if resources.store is not None:
        await resources.store.close()
        resources.store = None
