"""CRUD operations for the TransferQuota model.

Usage changes are single ``UPDATE`` statements so concurrent writers never
lose increments; latches are claimed with compare-and-set updates so only
one writer ever observes a given false -> true transition.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from transferquota.core.datetime_utils import utc_now_naive
from transferquota.crud._base import insert_ignoring_conflict
from transferquota.models.transfer_quota import TransferQuota

_LATCH_COLUMNS = {
    "warning": TransferQuota.warning_latch,
    "critical": TransferQuota.critical_latch,
}


class CRUDTransferQuota:
    """CRUD operations for the TransferQuota model."""

    model = TransferQuota

    async def get_by_account(self, db: AsyncSession, *, account_id: str) -> Optional[TransferQuota]:
        """Get the quota row of an account, or None."""
        result = await db.execute(select(self.model).where(self.model.account_id == account_id))
        return result.scalar_one_or_none()

    async def get_all(self, db: AsyncSession) -> list[TransferQuota]:
        """Get every quota row ordered by account id."""
        result = await db.execute(select(self.model).order_by(self.model.account_id))
        return list(result.scalars().all())

    async def get_account_ids(self, db: AsyncSession) -> list[str]:
        """Get the ids of every account with a quota row."""
        result = await db.execute(select(self.model.account_id).order_by(self.model.account_id))
        return list(result.scalars().all())

    async def ensure_exists(self, db: AsyncSession, *, account_id: str) -> bool:
        """Create an untracked row for the account if none exists.

        Returns:
            True when a row was inserted.
        """
        stmt = insert_ignoring_conflict(
            db,
            self.model,
            {
                "account_id": account_id,
                "monthly_limit_bytes": 0,
                "current_usage_bytes": 0,
                "last_reset_at": utc_now_naive(),
                "warning_latch": False,
                "critical_latch": False,
            },
            index_elements=["account_id"],
        )
        result = await db.execute(stmt)
        return result.rowcount == 1

    async def set_limit(
        self, db: AsyncSession, *, account_id: str, limit_bytes: int
    ) -> tuple[TransferQuota, bool]:
        """Upsert the account's limit.

        A changed limit clears both latches in the same statement.

        Returns:
            The row after the update and whether the limit changed.
        """
        await self.ensure_exists(db, account_id=account_id)
        result = await db.execute(
            select(self.model)
            .where(self.model.account_id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one()
        changed = record.monthly_limit_bytes != limit_bytes
        if changed:
            await db.execute(
                update(self.model)
                .where(self.model.account_id == account_id)
                .values(monthly_limit_bytes=limit_bytes, warning_latch=False, critical_latch=False)
                .execution_options(synchronize_session=False)
            )
            await db.refresh(record)
        return record, changed

    async def increment_usage(
        self, db: AsyncSession, *, account_id: str, amount: int
    ) -> Optional[TransferQuota]:
        """Atomically add ``amount`` bytes to a tracked account's usage.

        Returns:
            The row after the increment, or None when the account is untracked
            or has no row.
        """
        stmt = (
            update(self.model)
            .where(self.model.account_id == account_id, self.model.monthly_limit_bytes > 0)
            .values(current_usage_bytes=self.model.current_usage_bytes + amount)
            .returning(self.model)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def claim_latch(self, db: AsyncSession, *, account_id: str, kind: str) -> bool:
        """Set one latch if it is currently clear.

        Args:
            db: Database session
            account_id: Account whose latch to claim
            kind: ``warning`` or ``critical``

        Returns:
            True if this call flipped the latch from false to true.
        """
        column = _LATCH_COLUMNS[kind]
        stmt = (
            update(self.model)
            .where(self.model.account_id == account_id, column.is_(False))
            .values({column.key: True})
            .returning(self.model.id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def clear_latches(self, db: AsyncSession, *, account_id: str) -> Optional[TransferQuota]:
        """Clear both latches; returns the row or None if the account has none."""
        stmt = (
            update(self.model)
            .where(self.model.account_id == account_id)
            .values(warning_latch=False, critical_latch=False)
            .returning(self.model)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def reset_usage(
        self, db: AsyncSession, *, account_id: str, reset_at: Optional[datetime] = None
    ) -> bool:
        """Zero usage and latches of one account; False if it has no row."""
        stmt = (
            update(self.model)
            .where(self.model.account_id == account_id)
            .values(
                current_usage_bytes=0,
                warning_latch=False,
                critical_latch=False,
                last_reset_at=reset_at or utc_now_naive(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    async def reset_all(self, db: AsyncSession, *, reset_at: Optional[datetime] = None) -> int:
        """Zero usage and latches of every row in one statement; returns the row count."""
        stmt = (
            update(self.model)
            .values(
                current_usage_bytes=0,
                warning_latch=False,
                critical_latch=False,
                last_reset_at=reset_at or utc_now_naive(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount


transfer_quota = CRUDTransferQuota()
