"""Transfer quota ledger: singleton write service for per-account usage.

One instance lives in the container. Every change to ``current_usage_bytes``
is a single atomic ``UPDATE``; threshold latches are claimed with
compare-and-set updates inside the same transaction. Notifications are
dispatched only after that transaction commits and only for latches this
call actually claimed, so a crossing notifies at most once.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from transferquota.core.datetime_utils import utc_now_naive
from transferquota.core.exceptions import InvalidQuotaLimitError
from transferquota.core.logging import logger
from transferquota.db.errors import STORAGE_ERRORS
from transferquota.domains.notifications.protocols import NotificationDispatcherProtocol
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol
from transferquota.domains.quota.repository import (
    QuotaRepositoryProtocol,
    ThresholdSettingsRepositoryProtocol,
)
from transferquota.domains.quota.thresholds import evaluate_thresholds
from transferquota.domains.quota.types import LatchState
from transferquota.schemas.notification import QuotaNotification, SubjectKind
from transferquota.schemas.transfer_quota import QuotaRecord, QuotaThresholds


class TransferQuotaLedger(TransferQuotaLedgerProtocol):
    """Database-backed ledger.

    Owns its own DB sessions through ``get_db_context`` so callers never
    pass a session.
    """

    def __init__(
        self,
        quota_repo: QuotaRepositoryProtocol,
        settings_repo: ThresholdSettingsRepositoryProtocol,
        dispatcher: NotificationDispatcherProtocol,
    ) -> None:
        """Initialize the ledger with repository and dispatcher dependencies."""
        self._quota_repo = quota_repo
        self._settings_repo = settings_repo
        self._dispatcher = dispatcher

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_quota(self, account_id: str) -> Optional[QuotaRecord]:
        """Get the account's record, an untracked default if it has none."""
        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                record = await self._quota_repo.get(db, account_id=account_id)
        except STORAGE_ERRORS:
            logger.with_context(account_id=account_id).error(
                "Failed to read quota record", exc_info=True
            )
            return None
        return record or QuotaRecord.untracked(account_id)

    async def get_thresholds(self) -> Optional[QuotaThresholds]:
        """Get the global thresholds."""
        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                return await self._settings_repo.get_thresholds(db)
        except STORAGE_ERRORS:
            logger.error("Failed to read quota thresholds", exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def set_quota(self, account_id: str, limit_bytes: int) -> bool:
        """Upsert the account's limit.

        A changed limit clears both latches. When the new limit is positive
        and the account already has usage, thresholds are evaluated right
        away against the unchanged usage, which can fire a notification
        purely because the ceiling moved.

        Raises:
            InvalidQuotaLimitError: If ``limit_bytes`` is negative
        """
        if limit_bytes < 0:
            raise InvalidQuotaLimitError(limit_bytes)

        from transferquota.db.session import get_db_context

        log = logger.with_context(account_id=account_id)
        try:
            async with get_db_context() as db:
                record, changed = await self._quota_repo.set_limit(
                    db, account_id=account_id, limit_bytes=limit_bytes
                )
                notifications: list[QuotaNotification] = []
                if limit_bytes > 0 and record.current_usage_bytes > 0:
                    thresholds = await self._settings_repo.get_thresholds(db)
                    notifications = await self._claim_crossings(db, record, thresholds)
                await db.commit()
        except STORAGE_ERRORS:
            log.error("Failed to set quota limit", exc_info=True)
            return False

        if changed:
            log.info(f"Quota limit set to {limit_bytes} bytes, latches cleared")
        await self._dispatch(notifications)
        return True

    async def add_transfer(self, account_id: str, byte_count: int) -> bool:
        """Add ``byte_count`` bytes to the account's usage.

        Untracked accounts (limit 0, or no record yet) are a successful
        no-op; a missing record is created as untracked.
        """
        log = logger.with_context(account_id=account_id)
        if byte_count < 0:
            log.warning(f"Ignoring transfer with negative byte count {byte_count}")
            return False
        if byte_count == 0:
            return True

        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                record = await self._quota_repo.increment_usage(
                    db, account_id=account_id, amount=byte_count
                )
                if record is None:
                    await self._quota_repo.ensure_exists(db, account_id=account_id)
                    await db.commit()
                    return True

                thresholds = await self._settings_repo.get_thresholds(db)
                notifications = await self._claim_crossings(db, record, thresholds)
                await db.commit()
        except STORAGE_ERRORS:
            log.error(f"Failed to add transfer of {byte_count} bytes", exc_info=True)
            return False

        log.debug(f"Added {byte_count} bytes, usage now {record.current_usage_bytes}")
        await self._dispatch(notifications)
        return True

    async def force_check(self, account_id: str) -> bool:
        """Clear both latches, then evaluate the existing usage."""
        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                record = await self._quota_repo.clear_latches(db, account_id=account_id)
                notifications: list[QuotaNotification] = []
                if record is not None:
                    thresholds = await self._settings_repo.get_thresholds(db)
                    notifications = await self._claim_crossings(db, record, thresholds)
                await db.commit()
        except STORAGE_ERRORS:
            logger.with_context(account_id=account_id).error(
                "Failed to force threshold check", exc_info=True
            )
            return False

        await self._dispatch(notifications)
        return True

    async def force_check_all(self) -> bool:
        """Run ``force_check`` for every account with a record.

        Returns:
            True if every account was checked.
        """
        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                account_ids = await self._quota_repo.list_account_ids(db)
        except STORAGE_ERRORS:
            logger.error("Failed to list accounts for threshold check", exc_info=True)
            return False

        results = [await self.force_check(account_id) for account_id in account_ids]
        logger.info(f"Forced threshold check for {len(account_ids)} accounts")
        return all(results)

    async def reset_usage(self, account_id: str) -> bool:
        """Zero usage, clear latches and stamp ``last_reset_at``."""
        from transferquota.db.session import get_db_context

        log = logger.with_context(account_id=account_id)
        try:
            async with get_db_context() as db:
                found = await self._quota_repo.reset_usage(
                    db, account_id=account_id, reset_at=utc_now_naive()
                )
                await db.commit()
        except STORAGE_ERRORS:
            log.error("Failed to reset usage", exc_info=True)
            return False

        if found:
            log.info("Usage reset")
        else:
            log.debug("Usage reset requested for account without a quota record")
        return True

    async def reset_all(self) -> bool:
        """Zero usage and latches of every account in one statement."""
        from transferquota.db.session import get_db_context

        try:
            async with get_db_context() as db:
                count = await self._quota_repo.reset_all(db, reset_at=utc_now_naive())
                await db.commit()
        except STORAGE_ERRORS:
            logger.error("Failed to reset usage for all accounts", exc_info=True)
            return False

        logger.info(f"Usage reset for {count} accounts")
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _claim_crossings(
        self,
        db: AsyncSession,
        record: QuotaRecord,
        thresholds: QuotaThresholds,
    ) -> list[QuotaNotification]:
        """Evaluate thresholds and claim the latches of fired subjects.

        Must run inside the transaction that produced ``record``. Only
        subjects whose latch this call flipped are returned.
        """
        decision = evaluate_thresholds(
            usage_bytes=record.current_usage_bytes,
            limit_bytes=record.monthly_limit_bytes,
            warning_pct=thresholds.warning,
            critical_pct=thresholds.critical,
            latches=LatchState(warning=record.warning_latch, critical=record.critical_latch),
        )

        notifications = []
        for kind in decision.fired:
            claimed = await self._quota_repo.claim_latch(
                db, account_id=record.account_id, kind=kind
            )
            if not claimed:
                continue
            notifications.append(
                QuotaNotification(
                    account_id=record.account_id,
                    subject_kind=kind,
                    percent=round(decision.percent_used, 1),
                    threshold=(
                        thresholds.warning if kind == SubjectKind.WARNING else thresholds.critical
                    ),
                    usage_bytes=record.current_usage_bytes,
                    limit_bytes=record.monthly_limit_bytes,
                )
            )
        return notifications

    async def _dispatch(self, notifications: list[QuotaNotification]) -> None:
        """Dispatch committed crossings; failures never undo the ledger write."""
        for notification in notifications:
            try:
                await self._dispatcher.dispatch(notification)
            except Exception:
                logger.with_context(account_id=notification.account_id).error(
                    f"Dispatch of {notification.subject} failed", exc_info=True
                )
