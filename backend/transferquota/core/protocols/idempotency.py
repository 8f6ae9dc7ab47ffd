"""IdempotencyStore protocol for short-lived "seen this already" keys.

Two callers share one store:

- the ingestion deduplicator claims ``("transfer", <identity>)`` so the same
  physical transfer reported by several probes is billed once;
- the notification dispatcher claims ``("notification", <account>:<subject>)``
  so the same subject is not re-sent within the suppression window.

Usage:
    if await store.claim("transfer", identity, ttl_seconds=300):
        await ledger.add_transfer(account_id, byte_count)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IdempotencyStore(Protocol):
    """Protocol for TTL-bound idempotency keys.

    Implementations decide where keys live (process memory or Redis). Keys
    are best effort: a restart of an in-memory store forgets them.
    """

    async def claim(self, namespace: str, key: str, ttl_seconds: int) -> bool:
        """Record ``key`` if it is not already live.

        Args:
            namespace: Logical keyspace (e.g. ``transfer``, ``notification``)
            key: Identity within the namespace
            ttl_seconds: How long the claim stays live

        Returns:
            True the first time the key is seen within its TTL, False otherwise.
        """
        ...

    async def release(self, namespace: str, key: str) -> None:
        """Forget a key before its TTL expires."""
        ...

    async def clear(self) -> None:
        """Forget every key held by this store."""
        ...
