"""Redis-backed idempotency store.

Claims are ``SET <prefix>:<namespace>:<key> 1 NX EX <ttl>``, so a claim is a
single atomic round trip and every worker sharing the Redis instance sees it.
"""

from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from transferquota.core.redis_client import redis_client


class RedisIdempotencyStore:
    """Redis implementation of the IdempotencyStore protocol."""

    KEY_PREFIX = "transferquota:idem"

    def __init__(self, client: Optional[Redis] = None) -> None:
        """Initialize the store.

        Args:
            client: Redis client to use. Defaults to the shared pooled client.
        """
        self._client = client

    @property
    def client(self) -> Redis:
        return self._client if self._client is not None else redis_client.client

    @classmethod
    def make_key(cls, namespace: str, key: str) -> str:
        """Build the Redis key ``transferquota:idem:<namespace>:<key>``."""
        return f"{cls.KEY_PREFIX}:{namespace}:{key}"

    async def claim(self, namespace: str, key: str, ttl_seconds: int) -> bool:
        """Claim a key with ``SET NX EX``; True when this call created it."""
        created = await self.client.set(self.make_key(namespace, key), "1", nx=True, ex=ttl_seconds)
        return bool(created)

    async def release(self, namespace: str, key: str) -> None:
        """Delete a claim."""
        await self.client.delete(self.make_key(namespace, key))

    async def clear(self) -> None:
        """Delete every claim under the store's prefix."""
        keys = [k async for k in self.client.scan_iter(match=f"{self.KEY_PREFIX}:*")]
        if keys:
            await self.client.delete(*keys)
