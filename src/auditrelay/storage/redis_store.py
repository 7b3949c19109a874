"""Redis-backed key-value store.

Values are plain strings keyed by ``{prefix}:{key}``.
"""

from __future__ import annotations

from redis.asyncio import Redis  # type: ignore[import-untyped]

_DEFAULT_PREFIX = "auditrelay"


class RedisKeyValueStore:
    """Key-value store over an async Redis client."""

    def __init__(self, redis: Redis, *, prefix: str = _DEFAULT_PREFIX) -> None:
        self._redis = redis
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, *, prefix: str = _DEFAULT_PREFIX) -> RedisKeyValueStore:
        return cls(Redis.from_url(url), prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> str | None:
        raw = await self._redis.get(self._key(key))
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes) else raw

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(self._key(key), value)

    async def close(self) -> None:
        """Close the underlying Redis client."""
        await self._redis.aclose()
