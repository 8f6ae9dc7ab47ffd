"""Threshold notification schemas."""

from enum import Enum

from pydantic import BaseModel


class SubjectKind(str, Enum):
    """Which threshold a notification is about."""

    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def subject(self) -> str:
        """Subject key used by in-app notifications and the suppression guard."""
        return f"{self.value}_threshold_reached"


class QuotaNotification(BaseModel):
    """A threshold crossing to be dispatched.

    ``percent`` is rounded to one decimal; ``usage_bytes``/``limit_bytes``
    feed the e-mail bodies.
    """

    account_id: str
    subject_kind: SubjectKind
    percent: float
    threshold: int
    usage_bytes: int
    limit_bytes: int

    @property
    def subject(self) -> str:
        """Subject key, e.g. ``warning_threshold_reached``."""
        return self.subject_kind.subject

    def in_app_payload(self) -> dict:
        """Payload stored with the in-app notification."""
        return {
            "accountId": self.account_id,
            "subjectKind": self.subject_kind.value,
            "percent": self.percent,
            "threshold": self.threshold,
        }
