"""Datetime helpers.

The ledger stores naive UTC timestamps so the same columns work on
PostgreSQL ``TIMESTAMP`` and SQLite.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def utc_now_naive() -> datetime:
    """Current UTC time without tzinfo, for ``TIMESTAMP WITHOUT TIME ZONE`` columns."""
    return utc_now().replace(tzinfo=None)
