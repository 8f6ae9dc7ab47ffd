"""Threshold evaluation.

A pure decision function: given usage, limit, the two percentages and the
current latches, decide which notifications fire and what the latches
become. The ledger applies the decision by claiming latches in storage.
"""

from transferquota.domains.quota.types import LatchState, ThresholdDecision


def percent_used(usage_bytes: int, limit_bytes: int) -> float:
    """Usage as a percentage of the limit; 0.0 when the limit is the untracked sentinel."""
    if limit_bytes <= 0:
        return 0.0
    return usage_bytes / limit_bytes * 100


def evaluate_thresholds(
    usage_bytes: int,
    limit_bytes: int,
    warning_pct: int,
    critical_pct: int,
    latches: LatchState,
) -> ThresholdDecision:
    """Decide which threshold notifications fire.

    Warning and critical are checked independently, so one evaluation may
    fire both when usage jumps past both thresholds at once. A set latch
    suppresses its notification.

    Args:
        usage_bytes: Current usage
        limit_bytes: Monthly limit; ``<= 0`` means untracked and nothing fires
        warning_pct: Warning percentage (inclusive)
        critical_pct: Critical percentage (inclusive)
        latches: Latch state before the evaluation

    Returns:
        ThresholdDecision with the fired subjects and the resulting latches
    """
    if limit_bytes <= 0:
        return ThresholdDecision(percent_used=0.0, latches=latches)

    percent = percent_used(usage_bytes, limit_bytes)
    fire_warning = percent >= warning_pct and not latches.warning
    fire_critical = percent >= critical_pct and not latches.critical

    return ThresholdDecision(
        percent_used=percent,
        fire_warning=fire_warning,
        fire_critical=fire_critical,
        latches=LatchState(
            warning=latches.warning or fire_warning,
            critical=latches.critical or fire_critical,
        ),
    )
