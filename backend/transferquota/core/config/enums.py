"""Configuration enums for type-safe settings.

These enums provide type safety and IDE autocomplete for configuration values.
They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class IdempotencyBackend(str, Enum):
    """Idempotency store backends.

    Determines where dedup and notification-suppression keys live. ``redis``
    is shared by every worker; ``memory`` is scoped to one process.
    """

    REDIS = "redis"
    MEMORY = "memory"


class Environment(str, Enum):
    """Deployment environments.

    Controls environment-specific behavior like log formatting and URL
    construction.
    """

    LOCAL = "local"
    TEST = "test"
    DEV = "dev"
    PRD = "prd"
