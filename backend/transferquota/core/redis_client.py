"""Shared async Redis client.

One connection pool per process, created lazily from settings. Adapters use
``redis_client.client`` for commands and ``redis_client.publish`` for fan-out.
"""

from typing import Optional

from redis.asyncio import ConnectionPool, Redis

from transferquota.core.config import settings
from transferquota.core.logging import logger


class RedisClient:
    """Lazy wrapper around a pooled ``redis.asyncio.Redis``."""

    def __init__(self, url: Optional[str] = None, max_connections: int = 20) -> None:
        self._url = url
        self._max_connections = max_connections
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None

    @property
    def client(self) -> Redis:
        """Return the pooled client, creating the pool on first use."""
        if self._client is None:
            url = self._url or settings.redis_url
            self._pool = ConnectionPool.from_url(
                url,
                max_connections=self._max_connections,
                decode_responses=True,
            )
            self._client = Redis(connection_pool=self._pool)
            logger.info(f"Redis client created for {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        return self._client

    async def publish(self, channel: str, message: str) -> int:
        """Publish ``message`` on ``channel``; returns the subscriber count."""
        return await self.client.publish(channel, message)

    async def close(self) -> None:
        """Close the client and its pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None


redis_client = RedisClient()
