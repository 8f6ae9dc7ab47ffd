"""Aggregation domain types."""

from dataclasses import asdict, dataclass


@dataclass
class AggregationSummary:
    """Outcome of one aggregation pass."""

    accounts_seen: int = 0
    accounts_billed: int = 0
    bytes_billed: int = 0
    rebased: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
