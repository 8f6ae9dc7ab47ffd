"""Aggregation domain protocols."""

from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class DownloadCounterSourceProtocol(Protocol):
    """Running per-account download counters maintained by the host."""

    async def get_counts(self, db: AsyncSession) -> dict[str, int]:
        """Current counter of every account with a counter."""
        ...

    async def get_count(self, db: AsyncSession, *, account_id: str) -> Optional[int]:
        """Current counter of one account, or None if it has none."""
        ...


class WatermarkRepositoryProtocol(Protocol):
    """Counter values already folded into the ledger."""

    async def get(self, db: AsyncSession, *, account_id: str) -> int:
        """Last processed counter value (0 when never processed)."""
        ...

    async def set(self, db: AsyncSession, *, account_id: str, count: int) -> None:
        """Store the new watermark."""
        ...
