"""Quota domain types and constants.

No IO here.
"""

from dataclasses import dataclass, field

from transferquota.schemas.notification import SubjectKind

GIB = 1024**3

# Keys of the global settings rows holding the threshold percentages.
WARNING_THRESHOLD_KEY = "warning_threshold"
CRITICAL_THRESHOLD_KEY = "critical_threshold"


@dataclass(frozen=True)
class LatchState:
    """The two one-shot notification gates of an account."""

    warning: bool = False
    critical: bool = False


@dataclass(frozen=True)
class ThresholdDecision:
    """Outcome of one threshold evaluation.

    ``fired`` lists the subjects whose latch must be claimed, warning first.
    ``latches`` is the latch state after the evaluation.
    """

    percent_used: float
    fire_warning: bool = False
    fire_critical: bool = False
    latches: LatchState = field(default_factory=LatchState)

    @property
    def fired(self) -> list[SubjectKind]:
        kinds = []
        if self.fire_warning:
            kinds.append(SubjectKind.WARNING)
        if self.fire_critical:
            kinds.append(SubjectKind.CRITICAL)
        return kinds

