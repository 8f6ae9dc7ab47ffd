"""Activity and workflow wiring.

Connects the activity classes to their dependencies from the container.
"""

from transferquota.core.logging import logger


def create_activities() -> list:
    """Create activity instances with dependencies from the container.

    Returns:
        List of activity .run methods to register with the worker.
    """
    from transferquota.core import container as container_mod
    from transferquota.platform.temporal.activities import (
        AggregateDownloadCountsActivity,
        MonthlyResetActivity,
    )

    container = container_mod.container
    if container is None:
        raise RuntimeError("Container not initialized; call initialize_container() first")

    logger.debug("Wiring activities with container dependencies")

    return [
        AggregateDownloadCountsActivity(aggregator=container.aggregator).run,
        MonthlyResetActivity(reset_job=container.reset_job).run,
    ]


def get_workflows() -> list:
    """Get workflow classes to register."""
    from transferquota.platform.temporal.workflows import (
        DownloadAggregationWorkflow,
        MonthlyResetWorkflow,
    )

    return [
        DownloadAggregationWorkflow,
        MonthlyResetWorkflow,
    ]
