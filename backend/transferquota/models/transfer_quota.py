"""Per-account transfer quota record."""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column

from transferquota.core.datetime_utils import utc_now_naive
from transferquota.models._base import Base


class TransferQuota(Base):
    """Monthly transfer limit, accumulated usage and notification latches.

    One row per account. ``monthly_limit_bytes == 0`` marks the account as
    untracked. ``current_usage_bytes`` is only ever changed by a single
    ``UPDATE ... SET current_usage_bytes = current_usage_bytes + n`` statement
    or by a reset.
    """

    __tablename__ = "transfer_quota"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    monthly_limit_bytes: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    current_usage_bytes: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    last_reset_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now_naive
    )
    warning_latch: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    critical_latch: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
