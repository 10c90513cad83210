"""Redis-backed cache of shortened URLs."""

from __future__ import annotations

from typing import Any, Optional

from redis.asyncio import Redis

DEFAULT_TTL = 3600
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379


class RedisCache:
    """Stores shortened URLs in Redis with an expiry."""

    def __init__(self, host: str = "", port: str = "", client: Any = None) -> None:
        if client is None:
            client = Redis(
                host=host or DEFAULT_HOST,
                port=int(port) if port else DEFAULT_PORT,
                decode_responses=True,
            )
        self.client = client

    async def get(self, key: str) -> Optional[str]:
        """Return the cached value, or None on a miss or an empty key."""
        if not key:
            return None
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int = DEFAULT_TTL) -> None:
        """Store value under key; empty keys or values are ignored."""
        if not key or not value:
            return
        if ttl_seconds <= 0:
            ttl_seconds = DEFAULT_TTL
        await self.client.set(key, value, ex=ttl_seconds)

    async def close(self) -> None:
        """Release the connection pool."""
        await self.client.aclose()