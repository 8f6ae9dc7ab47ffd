"""In-memory idempotency store.

Keeps claims in an insertion-ordered dict with TTL-based expiry. Suitable for
single-process deployments and tests. Keys do not survive a restart and are
not shared between workers; use the Redis implementation for that.

Thread-safe via asyncio.Lock, safe for concurrent coroutines within
a single event loop.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from transferquota.core.logging import logger


class InMemoryIdempotencyStore:
    """In-memory implementation of the IdempotencyStore protocol.

    The table is bounded: once it holds more than ``max_entries`` keys,
    expired keys are dropped and, if that is not enough, the oldest keys are
    evicted until half the cap remains.

    Attributes:
        max_entries: Size at which eviction kicks in.
    """

    DEFAULT_MAX_ENTRIES = 100

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            max_entries: Bound on live keys before eviction. Defaults to 100.
            clock: Monotonic time source, injectable for tests.
        """
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[tuple[str, str], float] = {}  # (namespace, key) → expires_at
        self._lock = asyncio.Lock()

    async def claim(self, namespace: str, key: str, ttl_seconds: int) -> bool:
        """Claim a key unless a live claim already exists.

        Args:
            namespace: Logical keyspace
            key: Identity within the namespace
            ttl_seconds: Lifetime of the claim

        Returns:
            True if the key was not live and is now claimed.
        """
        entry = (namespace, key)
        async with self._lock:
            now = self._clock()
            expires_at = self._entries.get(entry)
            if expires_at is not None and expires_at > now:
                return False

            # Re-insert so an expired key moves to the young end of the order
            self._entries.pop(entry, None)
            self._entries[entry] = now + ttl_seconds

            if len(self._entries) > self.max_entries:
                self._evict(now)
            return True

    async def release(self, namespace: str, key: str) -> None:
        """Drop a claim."""
        async with self._lock:
            self._entries.pop((namespace, key), None)

    async def clear(self) -> None:
        """Drop every claim."""
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self, now: float) -> None:
        """Drop expired keys, then the oldest keys down to half the cap. Caller holds the lock."""
        self._entries = {k: exp for k, exp in self._entries.items() if exp > now}
        target = self.max_entries // 2
        if len(self._entries) <= self.max_entries:
            return

        overflow = len(self._entries) - target
        for entry in list(self._entries)[:overflow]:
            del self._entries[entry]
        logger.debug(f"[IdempotencyStore] Evicted {overflow} oldest keys, {target} remain")
