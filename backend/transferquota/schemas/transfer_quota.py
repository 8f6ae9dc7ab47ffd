"""Transfer quota schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from transferquota.core.datetime_utils import utc_now_naive
from transferquota.core.exceptions import InvalidThresholdsError


class QuotaRecord(BaseModel):
    """Read model of one account's ledger row."""

    account_id: str
    monthly_limit_bytes: int = 0
    current_usage_bytes: int = 0
    last_reset_at: datetime = Field(default_factory=utc_now_naive)
    warning_latch: bool = False
    critical_latch: bool = False

    model_config = {"from_attributes": True}

    @classmethod
    def untracked(cls, account_id: str) -> "QuotaRecord":
        """Default record for an account that has no row yet."""
        return cls(account_id=account_id)

    @property
    def is_tracked(self) -> bool:
        """Whether a positive limit is enforced for the account."""
        return self.monthly_limit_bytes > 0

    @property
    def percent_used(self) -> float:
        """Usage as a percentage of the limit; 0.0 for untracked accounts."""
        if not self.is_tracked:
            return 0.0
        return self.current_usage_bytes / self.monthly_limit_bytes * 100


class QuotaThresholds(BaseModel):
    """Global warning and critical percentages.

    Construction goes through ``model_validate``/the constructor so invalid
    combinations surface as ``InvalidThresholdsError`` at the admin boundary.
    """

    warning: int
    critical: int

    @model_validator(mode="after")
    def _check_range(self) -> "QuotaThresholds":
        if not (1 <= self.warning <= 100 and 1 <= self.critical <= 100):
            raise InvalidThresholdsError(self.warning, self.critical)
        if self.warning >= self.critical:
            raise InvalidThresholdsError(self.warning, self.critical)
        return self


class QuotaOverview(BaseModel):
    """Quotas of several accounts together with the global thresholds."""

    thresholds: QuotaThresholds
    quotas: list[QuotaRecord]
