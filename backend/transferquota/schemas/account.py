"""Account directory schema."""

from typing import Optional

from pydantic import BaseModel


class Account(BaseModel):
    """An account as seen by the notification dispatcher."""

    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    enabled: bool = True
    is_admin: bool = False

    @property
    def label(self) -> str:
        """Display name falling back to the account id."""
        return self.display_name or self.id
