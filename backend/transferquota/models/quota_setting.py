"""Global key/value settings for the quota system (threshold percentages)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from transferquota.models._base import Base


class TransferQuotaSetting(Base):
    """A single named setting value."""

    __tablename__ = "transfer_quota_setting"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
