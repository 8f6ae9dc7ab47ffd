"""Notification domain types."""

from dataclasses import dataclass, field


@dataclass
class DispatchResult:
    """What one dispatch actually delivered."""

    suppressed: bool = False
    account_found: bool = True
    in_app_sent: bool = False
    user_email_sent: bool = False
    admin_emails_sent: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def delivered_anything(self) -> bool:
        return self.in_app_sent or self.user_email_sent or bool(self.admin_emails_sent)
