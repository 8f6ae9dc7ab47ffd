"""Account directory loaded from a JSON export of the host's users.

The file is a list of objects::

    [{"id": "alice", "display_name": "Alice", "email": "alice@example.com",
      "enabled": true, "is_admin": false}, ...]

Hosts that expose their directory over an API implement AccountDirectory
directly instead.
"""

import json
from pathlib import Path
from typing import Iterable, Optional, Union

from transferquota.core.logging import logger
from transferquota.schemas.account import Account


class StaticAccountDirectory:
    """AccountDirectory over a fixed set of accounts."""

    def __init__(self, accounts: Iterable[Account] = ()) -> None:
        """Initialize from already-parsed accounts."""
        self._accounts: dict[str, Account] = {account.id: account for account in accounts}

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "StaticAccountDirectory":
        """Load accounts from a JSON file.

        Raises:
            OSError: If the file cannot be read
            pydantic.ValidationError: If an entry is malformed
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        accounts = [Account.model_validate(entry) for entry in raw]
        logger.info(f"Loaded {len(accounts)} accounts from {path}")
        return cls(accounts)

    async def get_account(self, account_id: str) -> Optional[Account]:
        """Return the account, or None."""
        return self._accounts.get(account_id)

    async def list_admins(self) -> list[Account]:
        """Return every admin account."""
        return [account for account in self._accounts.values() if account.is_admin]
