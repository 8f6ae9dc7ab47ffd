"""Monthly reset job.

Runs once a day. On the first day of the month (UTC) it zeroes every
account's usage and re-arms both notification latches; on any other day it
does nothing.
"""

from datetime import datetime
from typing import Callable

from transferquota.core.datetime_utils import utc_now
from transferquota.core.logging import logger
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol


class MonthlyResetJob:
    """Daily tick that resets usage on the first of the month."""

    def __init__(
        self,
        ledger: TransferQuotaLedgerProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the job with its ledger and clock."""
        self._ledger = ledger
        self._clock = clock

    async def run(self) -> bool:
        """Run one tick.

        Returns:
            True when a reset was performed, False otherwise (not the first of
            the month, or the reset failed).
        """
        today = self._clock()
        if today.day != 1:
            logger.debug(f"No monthly reset on {today.date().isoformat()}")
            return False

        logger.info(f"Resetting monthly transfer usage for {today.strftime('%Y-%m')}")
        if not await self._ledger.reset_all():
            logger.error("Monthly reset failed; it will be retried on the next run")
            return False
        return True
