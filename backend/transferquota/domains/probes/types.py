"""Probe domain types."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from transferquota.core.datetime_utils import utc_now


class TransferDirection(str, Enum):
    """Whether bytes left or entered the platform."""

    DOWNLOAD = "download"
    UPLOAD = "upload"


@dataclass
class TransferObservation:
    """What a detection point saw.

    Hosts fill in what they know; each probe reads the fields relevant to
    its mechanism. ``account_id`` is the account the request acted as, and
    ``share_owner_id`` the owner of a public share, who pays for its traffic.
    """

    account_id: Optional[str] = None
    byte_count: Optional[int] = None
    direction: TransferDirection = TransferDirection.DOWNLOAD
    file_id: Optional[str] = None
    path: Optional[str] = None
    action: str = "read"
    status_code: Optional[int] = None
    user_agent: Optional[str] = None
    share_token: Optional[str] = None
    share_owner_id: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    is_directory: bool = False
    modified_at: Optional[int] = None
    observed_at: datetime = field(default_factory=utc_now)

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def is_success(self) -> bool:
        """True when no status is known or the status is 2xx."""
        return self.status_code is None or 200 <= self.status_code < 300
