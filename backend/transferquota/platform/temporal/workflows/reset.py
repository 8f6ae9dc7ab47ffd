"""Temporal workflow for the daily monthly-reset tick."""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from transferquota.platform.temporal.activities import monthly_reset_activity


@workflow.defn
class MonthlyResetWorkflow:
    """Resets all usage on the first of the month, does nothing otherwise."""

    @workflow.run
    async def run(self) -> bool:
        """Execute the reset activity."""
        return await workflow.execute_activity(
            monthly_reset_activity,
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=RetryPolicy(maximum_attempts=1),
        )
