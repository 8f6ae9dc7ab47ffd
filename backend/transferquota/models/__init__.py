"""Models for the application."""

from ._base import Base
from .aggregation_watermark import TransferQuotaWatermark
from .quota_setting import TransferQuotaSetting
from .transfer_quota import TransferQuota

__all__ = ["Base", "TransferQuota", "TransferQuotaSetting", "TransferQuotaWatermark"]
