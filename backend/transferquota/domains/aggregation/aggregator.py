"""Download count aggregator.

Some sources only expose how many downloads happened, not how large they
were. Each pass compares every account's running counter with its
watermark and bills the difference at a fixed average size:

    delta = counter - watermark
    estimated_bytes = delta * average_size_bytes

The watermark advances only after the ledger accepts the transfer, so a
failed pass is retried by the next one. A counter that went backwards (the
host reset it) rebases the watermark without billing.
"""

from typing import Optional

from transferquota.core.config import settings
from transferquota.core.logging import logger
from transferquota.db.errors import STORAGE_ERRORS
from transferquota.domains.aggregation.protocols import (
    DownloadCounterSourceProtocol,
    WatermarkRepositoryProtocol,
)
from transferquota.domains.aggregation.types import AggregationSummary
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol


class DownloadCountAggregator:
    """Folds external download counters into the ledger."""

    def __init__(
        self,
        ledger: TransferQuotaLedgerProtocol,
        counter_source: DownloadCounterSourceProtocol,
        watermark_repo: WatermarkRepositoryProtocol,
        average_size_bytes: int = settings.AVERAGE_DOWNLOAD_SIZE_BYTES,
    ) -> None:
        """Initialize the aggregator."""
        self._ledger = ledger
        self._counter_source = counter_source
        self._watermark_repo = watermark_repo
        self._average_size = average_size_bytes

    async def run(self, account_id: Optional[str] = None) -> AggregationSummary:
        """Run one pass over every account, or over ``account_id`` only.

        Accounts are processed independently; a failure on one is logged,
        counted in ``errors`` and does not stop the pass.
        """
        from transferquota.db.session import get_db_context

        summary = AggregationSummary()
        try:
            async with get_db_context() as db:
                if account_id is None:
                    counts = await self._counter_source.get_counts(db)
                else:
                    count = await self._counter_source.get_count(db, account_id=account_id)
                    counts = {account_id: count} if count is not None else {}
        except STORAGE_ERRORS:
            logger.error("Failed to read download counters", exc_info=True)
            summary.errors += 1
            return summary

        for acc_id, count in counts.items():
            if count <= 0:
                continue
            summary.accounts_seen += 1
            try:
                await self._process_account(acc_id, count, summary)
            except STORAGE_ERRORS:
                logger.with_context(account_id=acc_id).error(
                    "Failed to aggregate downloads", exc_info=True
                )
                summary.errors += 1

        logger.info(
            f"Aggregation pass: {summary.accounts_seen} accounts seen, "
            f"{summary.accounts_billed} billed, {summary.bytes_billed} bytes, "
            f"{summary.errors} errors"
        )
        return summary

    async def _process_account(self, account_id: str, count: int, summary: AggregationSummary) -> None:
        from transferquota.db.session import get_db_context

        log = logger.with_context(account_id=account_id)
        async with get_db_context() as db:
            watermark = await self._watermark_repo.get(db, account_id=account_id)

        delta = count - watermark
        if delta == 0:
            return

        if delta < 0:
            log.warning(f"Download counter went backwards ({watermark} -> {count}), rebasing")
            await self._store_watermark(account_id, count)
            summary.rebased += 1
            return

        estimated_bytes = delta * self._average_size
        if not await self._ledger.add_transfer(account_id, estimated_bytes):
            log.error(f"Ledger rejected {delta} downloads, watermark kept at {watermark}")
            summary.errors += 1
            return

        await self._store_watermark(account_id, count)
        summary.accounts_billed += 1
        summary.bytes_billed += estimated_bytes
        log.info(f"Billed {delta} downloads as {estimated_bytes} bytes, watermark {count}")

    async def _store_watermark(self, account_id: str, count: int) -> None:
        from transferquota.db.session import get_db_context

        async with get_db_context() as db:
            await self._watermark_repo.set(db, account_id=account_id, count=count)
            await db.commit()
