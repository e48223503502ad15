"""Redis read-through cache for rendered event views.

Each event has a generation counter at ``<prefix><event_id>:gen``. Views are
stored as JSON under ``<prefix><event_id>:<generation>`` with a TTL. A
submission bumps the counter, so a view built from a snapshot read before the
submission lands under a generation nobody reads any more. Readers must take
the generation before loading from the store.

Redis failures are logged and treated as cache misses so reads still reach the
store.
"""

import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger("questboard.cache")


class EventViewCache:
    def __init__(self, client: redis.Redis, ttl_sec: int = 300, key_prefix: str = "questboard:event:") -> None:
        self._client = client
        self._ttl = ttl_sec
        self._prefix = key_prefix

    @property
    def client(self) -> redis.Redis:
        return self._client

    def generation_key(self, event_id: str) -> str:
        return f"{self._prefix}{event_id}:gen"

    def key(self, event_id: str, generation: int) -> str:
        return f"{self._prefix}{event_id}:{generation}"

    async def generation(self, event_id: str) -> int | None:
        """Current generation of the event's views, or None if Redis is unreachable."""
        try:
            raw = await self._client.get(self.generation_key(event_id))
        except RedisError as e:
            logger.warning("cache generation read failed event=%s err=%r", event_id, e)
            return None
        return int(raw) if raw is not None else 0

    async def get(self, event_id: str, generation: int) -> dict[str, Any] | None:
        try:
            raw = await self._client.get(self.key(event_id, generation))
        except RedisError as e:
            logger.warning("cache get failed event=%s err=%r", event_id, e)
            return None
        if raw is None:
            logger.debug("cache miss event=%s gen=%d", event_id, generation)
            return None
        logger.debug("cache hit event=%s gen=%d", event_id, generation)
        return json.loads(raw)

    async def set(self, event_id: str, generation: int, view: dict[str, Any]) -> None:
        try:
            await self._client.setex(self.key(event_id, generation), self._ttl, json.dumps(view))
        except RedisError as e:
            logger.warning("cache set failed event=%s err=%r", event_id, e)

    async def invalidate(self, event_id: str) -> None:
        """Start a new generation; views cached under older ones are never served again."""
        try:
            generation = await self._client.incr(self.generation_key(event_id))
            await self._client.delete(self.key(event_id, generation - 1))
        except RedisError as e:
            logger.warning("cache invalidate failed event=%s err=%r", event_id, e)

    async def ping(self) -> bool:
        try:
            await self._client.ping()
            return True
        except RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()
