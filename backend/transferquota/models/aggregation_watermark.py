"""Watermark of external download counters already billed to the ledger."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from transferquota.core.datetime_utils import utc_now_naive
from transferquota.models._base import Base


class TransferQuotaWatermark(Base):
    """Last external counter value folded into an account's usage."""

    __tablename__ = "transfer_quota_watermark"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    last_processed_count: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now_naive, onupdate=utc_now_naive
    )
