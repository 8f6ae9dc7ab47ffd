"""Tests for the activity classes, run directly without a Temporal worker."""

from datetime import datetime, timezone

from transferquota.domains.aggregation.types import AggregationSummary
from transferquota.domains.quota.fakes.ledger import FakeTransferQuotaLedger
from transferquota.domains.reset.monthly import MonthlyResetJob
from transferquota.platform.temporal.activities import (
    AggregateDownloadCountsActivity,
    MonthlyResetActivity,
)


class _StubAggregator:
    def __init__(self, summary: AggregationSummary) -> None:
        self.summary = summary
        self.runs = 0

    async def run(self, account_id=None) -> AggregationSummary:
        self.runs += 1
        return self.summary


async def test_aggregation_activity_returns_summary_dict():
    aggregator = _StubAggregator(AggregationSummary(accounts_seen=2, accounts_billed=1))
    activity = AggregateDownloadCountsActivity(aggregator=aggregator)

    result = await activity.run()

    assert aggregator.runs == 1
    assert result["accounts_seen"] == 2
    assert result["accounts_billed"] == 1
    assert result["errors"] == 0


async def test_reset_activity_delegates_to_job():
    ledger = FakeTransferQuotaLedger()
    job = MonthlyResetJob(ledger, clock=lambda: datetime(2026, 5, 1, tzinfo=timezone.utc))

    assert await MonthlyResetActivity(reset_job=job).run() is True
    assert ledger.resets == [None]
