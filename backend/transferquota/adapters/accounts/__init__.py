"""Account directory adapters."""

from transferquota.adapters.accounts.fake import FakeAccountDirectory
from transferquota.adapters.accounts.static import StaticAccountDirectory

__all__ = ["FakeAccountDirectory", "StaticAccountDirectory"]
