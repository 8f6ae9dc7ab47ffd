"""Temporal activity for the download count aggregation pass."""

from dataclasses import dataclass

from temporalio import activity

from transferquota.core.logging import logger
from transferquota.domains.aggregation.aggregator import DownloadCountAggregator


@dataclass
class AggregateDownloadCountsActivity:
    """Run one aggregation pass.

    Dependencies:
        aggregator: DownloadCountAggregator wired from the container
    """

    aggregator: DownloadCountAggregator

    @activity.defn(name="aggregate_download_counts_activity")
    async def run(self) -> dict[str, int]:
        """Fold new download counts into the ledger.

        Returns:
            Pass summary (accounts_seen, accounts_billed, bytes_billed, rebased, errors)
        """
        logger.info("Starting download count aggregation")
        summary = await self.aggregator.run()
        return summary.as_dict()
