"""Fake quota repositories for testing."""

import asyncio
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from transferquota.core.config import settings
from transferquota.core.exceptions import StorageUnavailableError
from transferquota.schemas.notification import SubjectKind
from transferquota.schemas.transfer_quota import QuotaRecord, QuotaThresholds


class FakeQuotaRepository:
    """In-memory fake for QuotaRepositoryProtocol.

    ``increment_usage`` applies the addition in one step and only then
    yields to the event loop, mirroring a single atomic UPDATE.
    Set ``fail_with`` to make every call raise.
    """

    def __init__(self) -> None:
        """Initialize empty in-memory stores."""
        self._records: dict[str, QuotaRecord] = {}
        self._calls: list[tuple] = []
        self.fail_with: Optional[Exception] = None

    def seed(
        self,
        account_id: str,
        limit_bytes: int = 0,
        usage_bytes: int = 0,
        warning_latch: bool = False,
        critical_latch: bool = False,
    ) -> QuotaRecord:
        """Store a record for an account."""
        record = QuotaRecord(
            account_id=account_id,
            monthly_limit_bytes=limit_bytes,
            current_usage_bytes=usage_bytes,
            warning_latch=warning_latch,
            critical_latch=critical_latch,
        )
        self._records[account_id] = record
        return record

    def record(self, account_id: str) -> Optional[QuotaRecord]:
        """Current stored record (test helper, no call logged)."""
        return self._records.get(account_id)

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    def _enter(self, *call) -> None:
        self._calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    async def get(self, db: AsyncSession, *, account_id: str) -> Optional[QuotaRecord]:
        """Get a record."""
        self._enter("get", account_id)
        record = self._records.get(account_id)
        return record.model_copy() if record is not None else None

    async def list_all(self, db: AsyncSession) -> list[QuotaRecord]:
        """Get every record."""
        self._enter("list_all")
        return [self._records[k].model_copy() for k in sorted(self._records)]

    async def list_account_ids(self, db: AsyncSession) -> list[str]:
        """Get every account id."""
        self._enter("list_account_ids")
        return sorted(self._records)

    async def ensure_exists(self, db: AsyncSession, *, account_id: str) -> None:
        """Create an untracked record when missing."""
        self._enter("ensure_exists", account_id)
        if account_id not in self._records:
            self._records[account_id] = QuotaRecord.untracked(account_id)

    async def set_limit(
        self, db: AsyncSession, *, account_id: str, limit_bytes: int
    ) -> tuple[QuotaRecord, bool]:
        """Upsert the limit."""
        self._enter("set_limit", account_id, limit_bytes)
        record = self._records.setdefault(account_id, QuotaRecord.untracked(account_id))
        changed = record.monthly_limit_bytes != limit_bytes
        if changed:
            record.monthly_limit_bytes = limit_bytes
            record.warning_latch = False
            record.critical_latch = False
        return record.model_copy(), changed

    async def increment_usage(
        self, db: AsyncSession, *, account_id: str, amount: int
    ) -> Optional[QuotaRecord]:
        """Add bytes to a tracked account."""
        self._enter("increment_usage", account_id, amount)
        record = self._records.get(account_id)
        if record is None or record.monthly_limit_bytes <= 0:
            return None
        record.current_usage_bytes += amount
        snapshot = record.model_copy()
        await asyncio.sleep(0)
        return snapshot

    async def claim_latch(self, db: AsyncSession, *, account_id: str, kind: SubjectKind) -> bool:
        """Flip one latch false -> true."""
        self._enter("claim_latch", account_id, kind)
        record = self._records.get(account_id)
        if record is None:
            return False
        attr = f"{kind.value}_latch"
        if getattr(record, attr):
            return False
        setattr(record, attr, True)
        return True

    async def clear_latches(self, db: AsyncSession, *, account_id: str) -> Optional[QuotaRecord]:
        """Clear both latches."""
        self._enter("clear_latches", account_id)
        record = self._records.get(account_id)
        if record is None:
            return None
        record.warning_latch = False
        record.critical_latch = False
        return record.model_copy()

    async def reset_usage(self, db: AsyncSession, *, account_id: str, reset_at: datetime) -> bool:
        """Zero usage and latches of one account."""
        self._enter("reset_usage", account_id, reset_at)
        record = self._records.get(account_id)
        if record is None:
            return False
        self._reset(record, reset_at)
        return True

    async def reset_all(self, db: AsyncSession, *, reset_at: datetime) -> int:
        """Zero usage and latches of every account."""
        self._enter("reset_all", reset_at)
        for record in self._records.values():
            self._reset(record, reset_at)
        return len(self._records)

    @staticmethod
    def _reset(record: QuotaRecord, reset_at: datetime) -> None:
        record.current_usage_bytes = 0
        record.warning_latch = False
        record.critical_latch = False
        record.last_reset_at = reset_at


class FakeThresholdSettingsRepository:
    """In-memory fake for ThresholdSettingsRepositoryProtocol."""

    def __init__(self, warning: Optional[int] = None, critical: Optional[int] = None) -> None:
        """Initialize with the configured defaults unless given explicitly."""
        self.thresholds = QuotaThresholds(
            warning=warning if warning is not None else settings.DEFAULT_WARNING_THRESHOLD,
            critical=critical if critical is not None else settings.DEFAULT_CRITICAL_THRESHOLD,
        )
        self.set_calls: list[QuotaThresholds] = []
        self.fail_with: Optional[Exception] = None

    async def get_thresholds(self, db: AsyncSession) -> QuotaThresholds:
        """Get the thresholds."""
        if self.fail_with is not None:
            raise self.fail_with
        return self.thresholds

    async def set_thresholds(self, db: AsyncSession, *, thresholds: QuotaThresholds) -> None:
        """Store new thresholds."""
        if self.fail_with is not None:
            raise self.fail_with
        self.set_calls.append(thresholds)
        self.thresholds = thresholds


def storage_down() -> StorageUnavailableError:
    """Error used by tests to simulate an unreachable database."""
    return StorageUnavailableError("database unreachable")
