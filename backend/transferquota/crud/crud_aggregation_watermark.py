"""CRUD operations for the TransferQuotaWatermark model."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from transferquota.core.datetime_utils import utc_now_naive
from transferquota.crud._base import insert_ignoring_conflict
from transferquota.models.aggregation_watermark import TransferQuotaWatermark


class CRUDAggregationWatermark:
    """Per-account watermark of the external download counter."""

    model = TransferQuotaWatermark

    async def get_count(self, db: AsyncSession, *, account_id: str) -> int:
        """Last processed counter value; 0 when the account was never processed."""
        result = await db.execute(
            select(self.model.last_processed_count).where(self.model.account_id == account_id)
        )
        return result.scalar_one_or_none() or 0

    async def set_count(self, db: AsyncSession, *, account_id: str, count: int) -> None:
        """Store the counter value the ledger now reflects."""
        now = utc_now_naive()
        inserted = await db.execute(
            insert_ignoring_conflict(
                db,
                self.model,
                {"account_id": account_id, "last_processed_count": count, "updated_at": now},
                ["account_id"],
            )
        )
        if inserted.rowcount == 0:
            await db.execute(
                update(self.model)
                .where(self.model.account_id == account_id)
                .values(last_processed_count=count, updated_at=now)
            )

    async def get_updated_since(
        self, db: AsyncSession, *, since: datetime
    ) -> list[TransferQuotaWatermark]:
        """Watermarks advanced at or after ``since``, newest first."""
        result = await db.execute(
            select(self.model)
            .where(self.model.updated_at >= since)
            .order_by(self.model.updated_at.desc())
        )
        return list(result.scalars().all())


aggregation_watermark = CRUDAggregationWatermark()
