"""Unit tests for the pure threshold evaluator."""

from transferquota.domains.quota.thresholds import evaluate_thresholds, percent_used
from transferquota.domains.quota.types import LatchState
from transferquota.schemas.notification import SubjectKind

GIB = 1024**3
CLEAR = LatchState()


def _evaluate(usage, limit=10 * GIB, latches=CLEAR, warning=80, critical=95):
    return evaluate_thresholds(
        usage_bytes=usage,
        limit_bytes=limit,
        warning_pct=warning,
        critical_pct=critical,
        latches=latches,
    )


def test_untracked_limit_never_fires():
    decision = _evaluate(usage=50 * GIB, limit=0)

    assert decision.fired == []
    assert decision.percent_used == 0.0


def test_below_warning_fires_nothing():
    assert _evaluate(usage=7 * GIB).fired == []


def test_exactly_warning_fires_warning_only():
    decision = _evaluate(usage=8 * GIB)

    assert decision.percent_used == 80.0
    assert decision.fired == [SubjectKind.WARNING]
    assert decision.latches == LatchState(warning=True, critical=False)


def test_jump_past_both_fires_both():
    decision = _evaluate(usage=int(9.6 * GIB))

    assert decision.fired == [SubjectKind.WARNING, SubjectKind.CRITICAL]
    assert decision.latches == LatchState(warning=True, critical=True)


def test_set_latch_blocks_its_subject():
    decision = _evaluate(usage=int(9.5 * GIB), latches=LatchState(warning=True))

    assert decision.percent_used == 95.0
    assert decision.fired == [SubjectKind.CRITICAL]


def test_both_latches_set_fires_nothing():
    decision = _evaluate(usage=20 * GIB, latches=LatchState(warning=True, critical=True))

    assert decision.fired == []
    assert decision.latches == LatchState(warning=True, critical=True)


def test_latches_are_never_cleared_by_evaluation():
    decision = _evaluate(usage=0, latches=LatchState(warning=True, critical=True))

    assert decision.latches == LatchState(warning=True, critical=True)


def test_percent_used_handles_zero_limit():
    assert percent_used(100, 0) == 0.0
    assert percent_used(5, 10) == 50.0
