"""Administrative operations on quotas, consumed by the CLI or an external API."""

from typing import Optional

from transferquota.core.logging import logger
from transferquota.db.errors import STORAGE_ERRORS
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol
from transferquota.domains.quota.repository import (
    QuotaRepositoryProtocol,
    ThresholdSettingsRepositoryProtocol,
)
from transferquota.domains.quota.types import GIB
from transferquota.schemas.transfer_quota import QuotaOverview, QuotaRecord, QuotaThresholds


class QuotaAdminService:
    """Query and change quotas and the global thresholds.

    Limit and usage writes go through the ledger; only the thresholds and
    the full record listing touch the repositories directly.
    """

    def __init__(
        self,
        ledger: TransferQuotaLedgerProtocol,
        quota_repo: QuotaRepositoryProtocol,
        settings_repo: ThresholdSettingsRepositoryProtocol,
    ) -> None:
        """Initialize the service."""
        self._ledger = ledger
        self._quota_repo = quota_repo
        self._settings_repo = settings_repo

    async def list_quotas(self, account_ids: Optional[list[str]] = None) -> Optional[QuotaOverview]:
        """Quotas plus the global thresholds.

        Args:
            account_ids: Accounts to include; untracked defaults are returned
                for accounts without a record. None lists every record.

        Returns:
            QuotaOverview, or None on storage failure.
        """
        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                thresholds = await self._settings_repo.get_thresholds(db)
                if account_ids is None:
                    quotas = await self._quota_repo.list_all(db)
                else:
                    quotas = []
                    for account_id in account_ids:
                        record = await self._quota_repo.get(db, account_id=account_id)
                        quotas.append(record or QuotaRecord.untracked(account_id))
        except STORAGE_ERRORS:
            logger.error("Failed to list quotas", exc_info=True)
            return None
        return QuotaOverview(thresholds=thresholds, quotas=quotas)

    async def set_quota_gib(self, account_id: str, gib: float) -> bool:
        """Set an account's limit in GiB; 0 makes the account untracked.

        Raises:
            InvalidQuotaLimitError: If ``gib`` is negative
        """
        limit_bytes = int(gib * GIB)
        return await self._ledger.set_quota(account_id, limit_bytes)

    async def set_thresholds(self, warning: int, critical: int) -> bool:
        """Persist new global percentages, then force a check of every account.

        Raises:
            InvalidThresholdsError: If the percentages are out of range or inverted
        """
        thresholds = QuotaThresholds(warning=warning, critical=critical)

        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                await self._settings_repo.set_thresholds(db, thresholds=thresholds)
                await db.commit()
        except STORAGE_ERRORS:
            logger.error("Failed to store thresholds", exc_info=True)
            return False

        logger.info(f"Thresholds set to warning={warning}% critical={critical}%")
        return await self._ledger.force_check_all()

    async def reset_usage(self, account_id: str) -> bool:
        """Reset one account's usage."""
        return await self._ledger.reset_usage(account_id)

    async def reset_all(self) -> bool:
        """Reset every account's usage."""
        return await self._ledger.reset_all()
