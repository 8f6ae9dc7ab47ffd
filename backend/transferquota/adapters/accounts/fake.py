"""Fake account directory for testing."""

from typing import Optional

from transferquota.schemas.account import Account


class FakeAccountDirectory:
    """Test implementation of AccountDirectory.

    Usage:
        directory = FakeAccountDirectory()
        directory.add("alice", email="alice@example.com")
        directory.add("root", email="root@example.com", is_admin=True)
    """

    def __init__(self) -> None:
        """Initialize an empty directory."""
        self._accounts: dict[str, Account] = {}
        self.lookups: list[str] = []
        self.fail_with: Optional[Exception] = None

    def add(
        self,
        account_id: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
        enabled: bool = True,
        is_admin: bool = False,
    ) -> Account:
        """Register an account and return it."""
        account = Account(
            id=account_id,
            display_name=display_name,
            email=email,
            enabled=enabled,
            is_admin=is_admin,
        )
        self._accounts[account_id] = account
        return account

    async def get_account(self, account_id: str) -> Optional[Account]:
        """Return the account, recording the lookup."""
        self.lookups.append(account_id)
        if self.fail_with is not None:
            raise self.fail_with
        return self._accounts.get(account_id)

    async def list_admins(self) -> list[Account]:
        """Return every admin account."""
        if self.fail_with is not None:
            raise self.fail_with
        return [account for account in self._accounts.values() if account.is_admin]
