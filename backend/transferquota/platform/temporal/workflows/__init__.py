"""Temporal workflows for the transfer quota jobs."""

from transferquota.platform.temporal.workflows.aggregation import DownloadAggregationWorkflow
from transferquota.platform.temporal.workflows.reset import MonthlyResetWorkflow

__all__ = [
    "DownloadAggregationWorkflow",
    "MonthlyResetWorkflow",
]
