"""Idempotency store adapters."""

from transferquota.adapters.idempotency.fake import FakeIdempotencyStore
from transferquota.adapters.idempotency.in_memory import InMemoryIdempotencyStore
from transferquota.adapters.idempotency.redis import RedisIdempotencyStore

__all__ = ["FakeIdempotencyStore", "InMemoryIdempotencyStore", "RedisIdempotencyStore"]
