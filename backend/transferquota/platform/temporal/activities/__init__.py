"""Temporal activity classes.

Each activity is a dataclass holding its dependencies with an
``@activity.defn`` decorated ``run`` method. Instances are wired in
``worker/wiring.py``; workflows import the unbound ``run`` references below,
Temporal matches them at runtime by the name given in ``@activity.defn``.
"""

from transferquota.platform.temporal.activities.aggregation import (
    AggregateDownloadCountsActivity,
)
from transferquota.platform.temporal.activities.reset import MonthlyResetActivity

aggregate_download_counts_activity = AggregateDownloadCountsActivity.run
monthly_reset_activity = MonthlyResetActivity.run

__all__ = [
    "AggregateDownloadCountsActivity",
    "MonthlyResetActivity",
    "aggregate_download_counts_activity",
    "monthly_reset_activity",
]
