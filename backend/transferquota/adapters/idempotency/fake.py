"""Fake idempotency store for testing.

Records every claim attempt and lets tests force keys to be treated as
already seen, without TTL bookkeeping.
"""

from typing import Optional


class FakeIdempotencyStore:
    """Test implementation of IdempotencyStore.

    Keys never expire on their own; call ``expire()`` to simulate the TTL
    running out.

    Usage:
        fake = FakeIdempotencyStore()
        dedup = TransferDeduplicator(ledger=ledger, store=fake)

        await dedup.report("node:42:read", "alice", 1024)
        assert fake.claimed("transfer", "node:42:read")
    """

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        """Initialize with empty state.

        Args:
            fail_with: If set, every claim raises this exception.
        """
        self._live: set[tuple[str, str]] = set()
        self.claims: list[tuple[str, str, int, bool]] = []  # (namespace, key, ttl, granted)
        self.fail_with = fail_with

    async def claim(self, namespace: str, key: str, ttl_seconds: int) -> bool:
        """Grant the claim unless the key is live."""
        if self.fail_with is not None:
            raise self.fail_with
        granted = (namespace, key) not in self._live
        self._live.add((namespace, key))
        self.claims.append((namespace, key, ttl_seconds, granted))
        return granted

    async def release(self, namespace: str, key: str) -> None:
        """Forget a key."""
        self._live.discard((namespace, key))

    async def clear(self) -> None:
        """Forget every key."""
        self._live.clear()

    # Test helpers

    def claimed(self, namespace: str, key: str) -> bool:
        """Check whether a key is currently live."""
        return (namespace, key) in self._live

    def expire(self, namespace: str, key: str) -> None:
        """Simulate the TTL of one key running out."""
        self._live.discard((namespace, key))

    def granted(self, namespace: str) -> list[str]:
        """Keys in ``namespace`` whose claim was granted, in order."""
        return [key for ns, key, _, ok in self.claims if ns == namespace and ok]
