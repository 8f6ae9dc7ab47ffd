"""Quota domain repositories wrapping the crud singletons.

Repositories hand out ``QuotaRecord`` schemas rather than ORM rows so the
ledger never holds on to session-bound objects after commit.
"""

from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from transferquota import crud
from transferquota.core.config import settings
from transferquota.domains.quota.types import CRITICAL_THRESHOLD_KEY, WARNING_THRESHOLD_KEY
from transferquota.schemas.notification import SubjectKind
from transferquota.schemas.transfer_quota import QuotaRecord, QuotaThresholds


class QuotaRepositoryProtocol(Protocol):
    """Data access for per-account quota records."""

    async def get(self, db: AsyncSession, *, account_id: str) -> Optional[QuotaRecord]:
        """Get an account's record, or None when it has none."""
        ...

    async def list_all(self, db: AsyncSession) -> list[QuotaRecord]:
        """Get every record."""
        ...

    async def list_account_ids(self, db: AsyncSession) -> list[str]:
        """Get the ids of every account with a record."""
        ...

    async def ensure_exists(self, db: AsyncSession, *, account_id: str) -> None:
        """Create an untracked record when the account has none."""
        ...

    async def set_limit(
        self, db: AsyncSession, *, account_id: str, limit_bytes: int
    ) -> tuple[QuotaRecord, bool]:
        """Upsert the limit, clearing latches if it changed. Returns (record, changed)."""
        ...

    async def increment_usage(
        self, db: AsyncSession, *, account_id: str, amount: int
    ) -> Optional[QuotaRecord]:
        """Atomically add bytes to a tracked account; None when untracked or missing."""
        ...

    async def claim_latch(self, db: AsyncSession, *, account_id: str, kind: SubjectKind) -> bool:
        """Flip one latch false -> true; True only for the caller that flipped it."""
        ...

    async def clear_latches(self, db: AsyncSession, *, account_id: str) -> Optional[QuotaRecord]:
        """Clear both latches; None when the account has no record."""
        ...

    async def reset_usage(self, db: AsyncSession, *, account_id: str, reset_at: datetime) -> bool:
        """Zero usage and latches of one account."""
        ...

    async def reset_all(self, db: AsyncSession, *, reset_at: datetime) -> int:
        """Zero usage and latches of every account; returns the number of records."""
        ...


class QuotaRepository(QuotaRepositoryProtocol):
    """Delegates to the crud.transfer_quota singleton."""

    async def get(self, db: AsyncSession, *, account_id: str) -> Optional[QuotaRecord]:
        """Get an account's record, or None when it has none."""
        row = await crud.transfer_quota.get_by_account(db, account_id=account_id)
        return QuotaRecord.model_validate(row) if row is not None else None

    async def list_all(self, db: AsyncSession) -> list[QuotaRecord]:
        """Get every record."""
        rows = await crud.transfer_quota.get_all(db)
        return [QuotaRecord.model_validate(row) for row in rows]

    async def list_account_ids(self, db: AsyncSession) -> list[str]:
        """Get the ids of every account with a record."""
        return await crud.transfer_quota.get_account_ids(db)

    async def ensure_exists(self, db: AsyncSession, *, account_id: str) -> None:
        """Create an untracked record when the account has none."""
        await crud.transfer_quota.ensure_exists(db, account_id=account_id)

    async def set_limit(
        self, db: AsyncSession, *, account_id: str, limit_bytes: int
    ) -> tuple[QuotaRecord, bool]:
        """Upsert the limit, clearing latches if it changed."""
        row, changed = await crud.transfer_quota.set_limit(
            db, account_id=account_id, limit_bytes=limit_bytes
        )
        return QuotaRecord.model_validate(row), changed

    async def increment_usage(
        self, db: AsyncSession, *, account_id: str, amount: int
    ) -> Optional[QuotaRecord]:
        """Atomically add bytes to a tracked account."""
        row = await crud.transfer_quota.increment_usage(db, account_id=account_id, amount=amount)
        return QuotaRecord.model_validate(row) if row is not None else None

    async def claim_latch(self, db: AsyncSession, *, account_id: str, kind: SubjectKind) -> bool:
        """Flip one latch false -> true."""
        return await crud.transfer_quota.claim_latch(db, account_id=account_id, kind=kind.value)

    async def clear_latches(self, db: AsyncSession, *, account_id: str) -> Optional[QuotaRecord]:
        """Clear both latches."""
        row = await crud.transfer_quota.clear_latches(db, account_id=account_id)
        return QuotaRecord.model_validate(row) if row is not None else None

    async def reset_usage(self, db: AsyncSession, *, account_id: str, reset_at: datetime) -> bool:
        """Zero usage and latches of one account."""
        return await crud.transfer_quota.reset_usage(db, account_id=account_id, reset_at=reset_at)

    async def reset_all(self, db: AsyncSession, *, reset_at: datetime) -> int:
        """Zero usage and latches of every account."""
        return await crud.transfer_quota.reset_all(db, reset_at=reset_at)


class ThresholdSettingsRepositoryProtocol(Protocol):
    """Data access for the global warning/critical percentages."""

    async def get_thresholds(self, db: AsyncSession) -> QuotaThresholds:
        """Get the stored thresholds, falling back to the configured defaults."""
        ...

    async def set_thresholds(self, db: AsyncSession, *, thresholds: QuotaThresholds) -> None:
        """Persist new thresholds."""
        ...


class ThresholdSettingsRepository(ThresholdSettingsRepositoryProtocol):
    """Delegates to the crud.quota_setting singleton."""

    async def get_thresholds(self, db: AsyncSession) -> QuotaThresholds:
        """Get the stored thresholds, falling back to the configured defaults."""
        values = await crud.quota_setting.get_values(
            db, keys=[WARNING_THRESHOLD_KEY, CRITICAL_THRESHOLD_KEY]
        )
        return QuotaThresholds(
            warning=int(values.get(WARNING_THRESHOLD_KEY, settings.DEFAULT_WARNING_THRESHOLD)),
            critical=int(values.get(CRITICAL_THRESHOLD_KEY, settings.DEFAULT_CRITICAL_THRESHOLD)),
        )

    async def set_thresholds(self, db: AsyncSession, *, thresholds: QuotaThresholds) -> None:
        """Persist new thresholds."""
        await crud.quota_setting.set_value(
            db, key=WARNING_THRESHOLD_KEY, value=str(thresholds.warning)
        )
        await crud.quota_setting.set_value(
            db, key=CRITICAL_THRESHOLD_KEY, value=str(thresholds.critical)
        )
