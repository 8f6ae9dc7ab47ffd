"""Fake aggregation repositories for testing."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from transferquota.core.exceptions import StorageUnavailableError


class FakeDownloadCounterSource:
    """In-memory fake for DownloadCounterSourceProtocol."""

    def __init__(self, counts: Optional[dict[str, int]] = None) -> None:
        """Initialize with the given counters."""
        self.counts: dict[str, int] = dict(counts or {})
        self.fail_with: Optional[Exception] = None

    async def get_counts(self, db: AsyncSession) -> dict[str, int]:
        """Every counter."""
        if self.fail_with is not None:
            raise self.fail_with
        return dict(self.counts)

    async def get_count(self, db: AsyncSession, *, account_id: str) -> Optional[int]:
        """One counter."""
        if self.fail_with is not None:
            raise self.fail_with
        return self.counts.get(account_id)


class FakeWatermarkRepository:
    """In-memory fake for WatermarkRepositoryProtocol."""

    def __init__(self, watermarks: Optional[dict[str, int]] = None) -> None:
        """Initialize with the given watermarks."""
        self.watermarks: dict[str, int] = dict(watermarks or {})
        self.set_calls: list[tuple[str, int]] = []
        self.fail_for: set[str] = set()

    async def get(self, db: AsyncSession, *, account_id: str) -> int:
        """Last processed value."""
        if account_id in self.fail_for:
            raise StorageUnavailableError(f"watermark of {account_id} unreadable")
        return self.watermarks.get(account_id, 0)

    async def set(self, db: AsyncSession, *, account_id: str, count: int) -> None:
        """Store a watermark."""
        self.set_calls.append((account_id, count))
        self.watermarks[account_id] = count
