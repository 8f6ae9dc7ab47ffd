"""Configuration module for the transfer quota backend.

Provides centralized configuration management with type-safe enums.

Usage:
    from transferquota.core.config import settings, Environment, IdempotencyBackend

    if settings.IDEMPOTENCY_BACKEND == IdempotencyBackend.REDIS:
        ...

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from transferquota.core.config.enums import Environment, IdempotencyBackend
from transferquota.core.config.settings import Settings

__all__ = [
    "Settings",
    "IdempotencyBackend",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
