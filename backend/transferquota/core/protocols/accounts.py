"""AccountDirectory protocol: who owns an account and who administers the system."""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from transferquota.schemas.account import Account


@runtime_checkable
class AccountDirectory(Protocol):
    """Read-only lookup into the host platform's user directory."""

    async def get_account(self, account_id: str) -> Optional["Account"]:
        """Return the account, or None if the host does not know it."""
        ...

    async def list_admins(self) -> list["Account"]:
        """Return every administrator account (enabled or not)."""
        ...
