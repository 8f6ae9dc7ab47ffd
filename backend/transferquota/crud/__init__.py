"""CRUD singletons."""

from .crud_aggregation_watermark import aggregation_watermark
from .crud_quota_setting import quota_setting
from .crud_transfer_quota import transfer_quota

__all__ = ["aggregation_watermark", "quota_setting", "transfer_quota"]
