"""Temporal schedules for the transfer quota jobs.

Two schedules are ensured when the worker starts:

- ``transfer-quota-aggregation`` runs DownloadAggregationWorkflow every
  ``AGGREGATION_INTERVAL_MINUTES``.
- ``transfer-quota-monthly-reset`` runs MonthlyResetWorkflow daily at
  00:05 UTC; the workflow only resets on the first of the month.

Both use overlap policy SKIP so a job never runs twice at the same time.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleIntervalSpec,
    ScheduleOverlapPolicy,
    SchedulePolicy,
    ScheduleSpec,
    ScheduleState,
)
from temporalio.service import RPCError, RPCStatusCode

from transferquota.core.config import Settings
from transferquota.core.logging import logger
from transferquota.platform.temporal.workflows import (
    DownloadAggregationWorkflow,
    MonthlyResetWorkflow,
)

AGGREGATION_SCHEDULE_ID = "transfer-quota-aggregation"
MONTHLY_RESET_SCHEDULE_ID = "transfer-quota-monthly-reset"
MONTHLY_RESET_CRON = "5 0 * * *"


@dataclass(frozen=True)
class ScheduleDefinition:
    """A schedule the worker keeps in place."""

    schedule_id: str
    workflow: Any
    workflow_id: str
    note: str
    interval: Optional[timedelta] = None
    cron: Optional[str] = None

    def build(self, task_queue: str) -> Schedule:
        """Temporal Schedule for this definition."""
        spec = ScheduleSpec(
            intervals=[ScheduleIntervalSpec(every=self.interval)] if self.interval else [],
            cron_expressions=[self.cron] if self.cron else [],
        )
        return Schedule(
            action=ScheduleActionStartWorkflow(
                self.workflow.run,
                id=self.workflow_id,
                task_queue=task_queue,
            ),
            spec=spec,
            policy=SchedulePolicy(overlap=ScheduleOverlapPolicy.SKIP),
            state=ScheduleState(note=self.note, paused=False),
        )


def get_schedule_definitions(settings: Settings) -> list[ScheduleDefinition]:
    """Schedules derived from the settings."""
    return [
        ScheduleDefinition(
            schedule_id=AGGREGATION_SCHEDULE_ID,
            workflow=DownloadAggregationWorkflow,
            workflow_id="transfer-quota-aggregation-workflow",
            note="Fold external download counters into transfer usage",
            interval=timedelta(minutes=settings.AGGREGATION_INTERVAL_MINUTES),
        ),
        ScheduleDefinition(
            schedule_id=MONTHLY_RESET_SCHEDULE_ID,
            workflow=MonthlyResetWorkflow,
            workflow_id="transfer-quota-monthly-reset-workflow",
            note="Daily tick; resets transfer usage on the first of the month (UTC)",
            cron=MONTHLY_RESET_CRON,
        ),
    ]


async def _schedule_exists(client: Client, schedule_id: str) -> bool:
    try:
        await client.get_schedule_handle(schedule_id).describe()
        return True
    except RPCError as e:
        if e.status == RPCStatusCode.NOT_FOUND:
            return False
        raise


async def ensure_schedules(client: Client, settings: Settings) -> list[str]:
    """Create any missing schedule.

    Existing schedules are left untouched.

    Returns:
        IDs of the schedules that were created
    """
    created = []
    for definition in get_schedule_definitions(settings):
        if await _schedule_exists(client, definition.schedule_id):
            logger.info(f"Schedule {definition.schedule_id} already exists")
            continue
        await client.create_schedule(
            definition.schedule_id,
            definition.build(settings.TEMPORAL_TASK_QUEUE),
        )
        logger.info(f"Created schedule {definition.schedule_id}")
        created.append(definition.schedule_id)
    return created
