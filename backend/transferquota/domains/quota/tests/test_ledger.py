"""Unit tests for TransferQuotaLedger: increments, latches, resets and failures."""

import asyncio
from unittest.mock import patch

import pytest

from transferquota.core.exceptions import InvalidQuotaLimitError
from transferquota.domains.notifications.fakes.dispatcher import FakeNotificationDispatcher
from transferquota.domains.quota.fakes.repository import storage_down
from transferquota.domains.quota.tests.conftest import (
    DEFAULT_ACCOUNT,
    GIB,
    _fake_db_context,
    _make_ledger,
)


# ---------------------------------------------------------------------------
# add_transfer
# ---------------------------------------------------------------------------


@patch("transferquota.db.session.get_db_context", _fake_db_context)
class TestAddTransfer:
    @pytest.mark.asyncio
    async def test_increments_usage(self):
        ledger, quota_repo, *_ = _make_ledger()

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, 1024) is True

        assert quota_repo.record(DEFAULT_ACCOUNT).current_usage_bytes == 1024

    @pytest.mark.asyncio
    async def test_untracked_account_is_noop(self):
        ledger, quota_repo, _, dispatcher = _make_ledger(limit_bytes=0)

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, 50 * GIB) is True

        assert quota_repo.record(DEFAULT_ACCOUNT).current_usage_bytes == 0
        assert dispatcher.dispatched == []

    @pytest.mark.asyncio
    async def test_unknown_account_gets_untracked_record(self):
        ledger, quota_repo, _, dispatcher = _make_ledger(seed=False)

        assert await ledger.add_transfer("bob", 1024) is True

        record = quota_repo.record("bob")
        assert record is not None
        assert record.monthly_limit_bytes == 0
        assert record.current_usage_bytes == 0
        assert dispatcher.dispatched == []

    @pytest.mark.asyncio
    async def test_zero_bytes_touches_nothing(self):
        ledger, quota_repo, *_ = _make_ledger()

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, 0) is True

        assert quota_repo.call_count("increment_usage") == 0

    @pytest.mark.asyncio
    async def test_negative_bytes_rejected(self):
        ledger, quota_repo, *_ = _make_ledger()

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, -5) is False

        assert quota_repo.call_count("increment_usage") == 0


# ---------------------------------------------------------------------------
# Threshold crossings
# ---------------------------------------------------------------------------


@patch("transferquota.db.session.get_db_context", _fake_db_context)
class TestThresholdCrossings:
    @pytest.mark.asyncio
    async def test_warning_then_critical_then_silence(self):
        ledger, quota_repo, _, dispatcher = _make_ledger(limit_bytes=10 * GIB)

        await ledger.add_transfer(DEFAULT_ACCOUNT, 8 * GIB)

        record = quota_repo.record(DEFAULT_ACCOUNT)
        assert record.current_usage_bytes == 8 * GIB
        assert record.warning_latch is True
        assert record.critical_latch is False
        assert dispatcher.subjects_for(DEFAULT_ACCOUNT) == ["warning_threshold_reached"]
        assert dispatcher.dispatched[0].percent == 80.0
        assert dispatcher.dispatched[0].threshold == 80

        await ledger.add_transfer(DEFAULT_ACCOUNT, int(1.5 * GIB))

        record = quota_repo.record(DEFAULT_ACCOUNT)
        assert record.current_usage_bytes == int(9.5 * GIB)
        assert record.critical_latch is True
        assert dispatcher.subjects_for(DEFAULT_ACCOUNT) == [
            "warning_threshold_reached",
            "critical_threshold_reached",
        ]
        assert dispatcher.dispatched[1].percent == 95.0

        await ledger.add_transfer(DEFAULT_ACCOUNT, GIB)
        await ledger.add_transfer(DEFAULT_ACCOUNT, GIB)

        assert len(dispatcher.dispatched) == 2

    @pytest.mark.asyncio
    async def test_single_jump_fires_both(self):
        ledger, _, _, dispatcher = _make_ledger(limit_bytes=10 * GIB)

        await ledger.add_transfer(DEFAULT_ACCOUNT, 10 * GIB)

        assert dispatcher.subjects_for(DEFAULT_ACCOUNT) == [
            "warning_threshold_reached",
            "critical_threshold_reached",
        ]

    @pytest.mark.asyncio
    async def test_concurrent_crossing_notifies_once(self):
        ledger, _, _, dispatcher = _make_ledger(limit_bytes=100 * GIB)

        await asyncio.gather(*(ledger.add_transfer(DEFAULT_ACCOUNT, GIB) for _ in range(90)))

        assert dispatcher.subjects_for(DEFAULT_ACCOUNT) == ["warning_threshold_reached"]

    @pytest.mark.asyncio
    async def test_dispatch_failure_keeps_increment_and_latch(self):
        dispatcher = FakeNotificationDispatcher(fail_with=RuntimeError("smtp down"))
        ledger, quota_repo, *_ = _make_ledger(dispatcher=dispatcher)

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, 8 * GIB) is True

        record = quota_repo.record(DEFAULT_ACCOUNT)
        assert record.current_usage_bytes == 8 * GIB
        assert record.warning_latch is True


# ---------------------------------------------------------------------------
# set_quota
# ---------------------------------------------------------------------------


@patch("transferquota.db.session.get_db_context", _fake_db_context)
class TestSetQuota:
    @pytest.mark.asyncio
    async def test_creates_record_lazily(self):
        ledger, quota_repo, *_ = _make_ledger(seed=False)

        assert await ledger.set_quota("bob", 5 * GIB) is True

        assert quota_repo.record("bob").monthly_limit_bytes == 5 * GIB

    @pytest.mark.asyncio
    async def test_unchanged_limit_preserves_latches(self):
        ledger, quota_repo, _, dispatcher = _make_ledger(limit_bytes=10 * GIB)
        quota_repo.seed(
            DEFAULT_ACCOUNT, limit_bytes=10 * GIB, usage_bytes=9 * GIB, warning_latch=True
        )

        await ledger.set_quota(DEFAULT_ACCOUNT, 10 * GIB)

        assert quota_repo.record(DEFAULT_ACCOUNT).warning_latch is True
        assert dispatcher.dispatched == []

    @pytest.mark.asyncio
    async def test_changed_limit_refires_against_old_usage(self):
        ledger, quota_repo, _, dispatcher = _make_ledger()
        quota_repo.seed(
            DEFAULT_ACCOUNT, limit_bytes=10 * GIB, usage_bytes=9 * GIB, warning_latch=True
        )

        await ledger.set_quota(DEFAULT_ACCOUNT, 11 * GIB)

        record = quota_repo.record(DEFAULT_ACCOUNT)
        assert record.current_usage_bytes == 9 * GIB
        assert record.warning_latch is True
        assert dispatcher.subjects_for(DEFAULT_ACCOUNT) == ["warning_threshold_reached"]

    @pytest.mark.asyncio
    async def test_changed_limit_stays_silent_when_now_under(self):
        ledger, quota_repo, _, dispatcher = _make_ledger()
        quota_repo.seed(
            DEFAULT_ACCOUNT, limit_bytes=10 * GIB, usage_bytes=9 * GIB, warning_latch=True
        )

        await ledger.set_quota(DEFAULT_ACCOUNT, 100 * GIB)

        record = quota_repo.record(DEFAULT_ACCOUNT)
        assert record.warning_latch is False
        assert record.critical_latch is False
        assert dispatcher.dispatched == []

    @pytest.mark.asyncio
    async def test_negative_limit_raises(self):
        ledger, *_ = _make_ledger()

        with pytest.raises(InvalidQuotaLimitError):
            await ledger.set_quota(DEFAULT_ACCOUNT, -1)


# ---------------------------------------------------------------------------
# force_check / resets
# ---------------------------------------------------------------------------


@patch("transferquota.db.session.get_db_context", _fake_db_context)
class TestForceCheckAndReset:
    @pytest.mark.asyncio
    async def test_force_check_refires_without_touching_usage(self):
        ledger, quota_repo, _, dispatcher = _make_ledger()
        quota_repo.seed(
            DEFAULT_ACCOUNT,
            limit_bytes=10 * GIB,
            usage_bytes=int(9.5 * GIB),
            warning_latch=True,
            critical_latch=True,
        )

        assert await ledger.force_check(DEFAULT_ACCOUNT) is True

        assert quota_repo.record(DEFAULT_ACCOUNT).current_usage_bytes == int(9.5 * GIB)
        assert dispatcher.subjects_for(DEFAULT_ACCOUNT) == [
            "warning_threshold_reached",
            "critical_threshold_reached",
        ]

    @pytest.mark.asyncio
    async def test_force_check_all_visits_every_account(self):
        ledger, quota_repo, *_ = _make_ledger()
        quota_repo.seed("bob", limit_bytes=GIB)

        assert await ledger.force_check_all() is True

        assert quota_repo.call_count("clear_latches") == 2

    @pytest.mark.asyncio
    async def test_reset_usage_zeroes_record(self):
        ledger, quota_repo, *_ = _make_ledger()
        quota_repo.seed(
            DEFAULT_ACCOUNT,
            limit_bytes=10 * GIB,
            usage_bytes=9 * GIB,
            warning_latch=True,
            critical_latch=True,
        )
        before = quota_repo.record(DEFAULT_ACCOUNT).last_reset_at

        assert await ledger.reset_usage(DEFAULT_ACCOUNT) is True

        record = quota_repo.record(DEFAULT_ACCOUNT)
        assert record.current_usage_bytes == 0
        assert record.warning_latch is False
        assert record.critical_latch is False
        assert record.last_reset_at >= before

    @pytest.mark.asyncio
    async def test_reset_all_zeroes_every_record(self):
        ledger, quota_repo, *_ = _make_ledger(usage_bytes=3 * GIB)
        quota_repo.seed("bob", limit_bytes=GIB, usage_bytes=GIB, critical_latch=True)

        assert await ledger.reset_all() is True

        for account_id in (DEFAULT_ACCOUNT, "bob"):
            record = quota_repo.record(account_id)
            assert record.current_usage_bytes == 0
            assert record.critical_latch is False


# ---------------------------------------------------------------------------
# Storage failures
# ---------------------------------------------------------------------------


@patch("transferquota.db.session.get_db_context", _fake_db_context)
class TestStorageFailures:
    @pytest.mark.asyncio
    async def test_add_transfer_returns_false(self):
        ledger, quota_repo, _, dispatcher = _make_ledger()
        quota_repo.fail_with = storage_down()

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, 1024) is False
        assert dispatcher.dispatched == []

    @pytest.mark.asyncio
    async def test_set_quota_returns_false(self):
        ledger, quota_repo, *_ = _make_ledger()
        quota_repo.fail_with = OSError("connection reset")

        assert await ledger.set_quota(DEFAULT_ACCOUNT, GIB) is False

    @pytest.mark.asyncio
    async def test_get_quota_returns_none(self):
        ledger, quota_repo, *_ = _make_ledger()
        quota_repo.fail_with = storage_down()

        assert await ledger.get_quota(DEFAULT_ACCOUNT) is None

    @pytest.mark.asyncio
    async def test_reset_all_returns_false(self):
        ledger, quota_repo, *_ = _make_ledger()
        quota_repo.fail_with = storage_down()

        assert await ledger.reset_all() is False

    @pytest.mark.asyncio
    async def test_threshold_read_failure_returns_false(self):
        ledger, _, settings_repo, _ = _make_ledger()
        settings_repo.fail_with = storage_down()

        assert await ledger.add_transfer(DEFAULT_ACCOUNT, 8 * GIB) is False


@patch("transferquota.db.session.get_db_context", _fake_db_context)
class TestGetQuota:
    @pytest.mark.asyncio
    async def test_missing_account_returns_untracked_default(self):
        ledger, *_ = _make_ledger(seed=False)

        record = await ledger.get_quota("nobody")

        assert record.account_id == "nobody"
        assert record.monthly_limit_bytes == 0
        assert record.is_tracked is False
