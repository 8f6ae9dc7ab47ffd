"""Fake e-mail sender for testing."""

from dataclasses import dataclass
from typing import Optional

from transferquota.core.exceptions import EmailDeliveryError


@dataclass
class SentEmail:
    """One recorded e-mail."""

    to_email: str
    subject: str
    html_body: str


class FakeEmailSender:
    """Test implementation of EmailSender.

    Records every sent e-mail. Recipients listed in ``failing_recipients``
    raise ``EmailDeliveryError`` instead.

    Usage:
        fake = FakeEmailSender(failing_recipients={"bob@example.com"})
        ...
        assert fake.recipients == ["alice@example.com"]
    """

    def __init__(self, failing_recipients: Optional[set[str]] = None) -> None:
        """Initialize with no sent e-mails."""
        self.sent: list[SentEmail] = []
        self.failing_recipients = set(failing_recipients or ())

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        """Record the e-mail or raise for a failing recipient."""
        if to_email in self.failing_recipients:
            raise EmailDeliveryError(to_email)
        self.sent.append(SentEmail(to_email=to_email, subject=subject, html_body=html_body))

    # Test helpers

    @property
    def recipients(self) -> list[str]:
        """Recipients of successfully sent e-mails, in order."""
        return [email.to_email for email in self.sent]

    def sent_to(self, to_email: str) -> list[SentEmail]:
        """E-mails successfully sent to one recipient."""
        return [email for email in self.sent if email.to_email == to_email]

    def clear(self) -> None:
        """Forget every recorded e-mail."""
        self.sent.clear()
