"""Pydantic schemas shared across domains."""

from .account import Account
from .notification import QuotaNotification, SubjectKind
from .transfer_quota import QuotaOverview, QuotaRecord, QuotaThresholds

__all__ = [
    "Account",
    "QuotaNotification",
    "QuotaOverview",
    "QuotaRecord",
    "QuotaThresholds",
    "SubjectKind",
]
