"""Best-effort rate cache on top of redis."""

from __future__ import annotations

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisRateCache:
    """Cache failures are logged and reported as misses; they never propagate.

    A ``None`` client disables caching entirely.
    """

    def __init__(self, client: Redis | None) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        if self._client is None:
            return None
        try:
            value = await self._client.get(key)
        except RedisError as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if self._client is None:
            return
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
