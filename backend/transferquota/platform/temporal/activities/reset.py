"""Temporal activity for the monthly usage reset."""

from dataclasses import dataclass

from temporalio import activity

from transferquota.domains.reset.monthly import MonthlyResetJob


@dataclass
class MonthlyResetActivity:
    """Daily tick of the monthly reset.

    Dependencies:
        reset_job: MonthlyResetJob wired from the container
    """

    reset_job: MonthlyResetJob

    @activity.defn(name="monthly_reset_activity")
    async def run(self) -> bool:
        """Reset all usage when today is the first of the month."""
        return await self.reset_job.run()
