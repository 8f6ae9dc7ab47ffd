"""CRUD operations for the TransferQuotaSetting model."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from transferquota.crud._base import insert_ignoring_conflict
from transferquota.models.quota_setting import TransferQuotaSetting


class CRUDQuotaSetting:
    """Key/value access to the global quota settings."""

    model = TransferQuotaSetting

    async def get_value(self, db: AsyncSession, *, key: str) -> Optional[str]:
        """Get a setting value, or None when unset."""
        result = await db.execute(select(self.model.value).where(self.model.key == key))
        return result.scalar_one_or_none()

    async def get_values(self, db: AsyncSession, *, keys: list[str]) -> dict[str, str]:
        """Get several settings at once; unset keys are absent from the result."""
        result = await db.execute(
            select(self.model.key, self.model.value).where(self.model.key.in_(keys))
        )
        return {row.key: row.value for row in result}

    async def set_value(self, db: AsyncSession, *, key: str, value: str) -> None:
        """Insert or overwrite a setting."""
        inserted = await db.execute(
            insert_ignoring_conflict(db, self.model, {"key": key, "value": value}, ["key"])
        )
        if inserted.rowcount == 0:
            await db.execute(update(self.model).where(self.model.key == key).values(value=value))


quota_setting = CRUDQuotaSetting()
