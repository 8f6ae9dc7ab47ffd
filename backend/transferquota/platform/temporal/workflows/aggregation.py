"""Temporal workflow for periodic download count aggregation."""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from transferquota.platform.temporal.activities import aggregate_download_counts_activity


@workflow.defn
class DownloadAggregationWorkflow:
    """Runs one aggregation pass. Retries are left to the next scheduled run."""

    @workflow.run
    async def run(self) -> dict[str, int]:
        """Execute the aggregation activity.

        Returns:
        -------
            dict[str, int]: Aggregation summary

        """
        return await workflow.execute_activity(
            aggregate_download_counts_activity,
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=RetryPolicy(maximum_attempts=1),
        )
