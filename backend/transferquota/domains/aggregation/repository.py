"""Aggregation repositories.

The counter source reads the host's key/value preferences table, where the
host's usage reporting keeps one running download count per user:
``(userid, appid, configkey, configvalue)``.
"""

from typing import Optional

from sqlalchemy import column, select, table
from sqlalchemy.ext.asyncio import AsyncSession

from transferquota import crud
from transferquota.core.config import settings
from transferquota.core.logging import logger
from transferquota.domains.aggregation.protocols import (
    DownloadCounterSourceProtocol,
    WatermarkRepositoryProtocol,
)


def _parse_count(account_id: str, raw: Optional[str]) -> Optional[int]:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        logger.with_context(account_id=account_id).debug(f"Ignoring non-numeric counter {raw!r}")
        return None


class PreferencesCounterSource(DownloadCounterSourceProtocol):
    """DownloadCounterSource over the host's preferences table."""

    def __init__(
        self,
        table_name: str = settings.EXTERNAL_COUNTER_TABLE,
        app_id: str = settings.EXTERNAL_COUNTER_APP_ID,
        config_key: str = settings.EXTERNAL_COUNTER_KEY,
    ) -> None:
        """Initialize the source.

        Args:
            table_name: Host table holding the counters
            app_id: ``appid`` of the counter rows
            config_key: ``configkey`` of the counter rows
        """
        self._table = table(
            table_name,
            column("userid"),
            column("appid"),
            column("configkey"),
            column("configvalue"),
        )
        self._app_id = app_id
        self._config_key = config_key

    def _query(self):
        t = self._table
        return select(t.c.userid, t.c.configvalue).where(
            t.c.appid == self._app_id, t.c.configkey == self._config_key
        )

    async def get_counts(self, db: AsyncSession) -> dict[str, int]:
        """Current counter of every account with a numeric counter."""
        result = await db.execute(self._query())
        counts: dict[str, int] = {}
        for account_id, raw in result:
            count = _parse_count(account_id, raw)
            if count is not None:
                counts[str(account_id)] = count
        return counts

    async def get_count(self, db: AsyncSession, *, account_id: str) -> Optional[int]:
        """Current counter of one account."""
        result = await db.execute(self._query().where(self._table.c.userid == account_id))
        row = result.first()
        return _parse_count(account_id, row[1]) if row is not None else None


class WatermarkRepository(WatermarkRepositoryProtocol):
    """Delegates to the crud.aggregation_watermark singleton."""

    async def get(self, db: AsyncSession, *, account_id: str) -> int:
        """Last processed counter value."""
        return await crud.aggregation_watermark.get_count(db, account_id=account_id)

    async def set(self, db: AsyncSession, *, account_id: str, count: int) -> None:
        """Store the new watermark."""
        await crud.aggregation_watermark.set_count(db, account_id=account_id, count=count)
