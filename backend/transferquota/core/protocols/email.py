"""EmailSender protocol for outbound notification e-mail."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmailSender(Protocol):
    """Sends a single HTML e-mail.

    Implementations raise ``EmailDeliveryError`` when the transport rejects
    the message; callers decide whether that aborts anything else.
    """

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        """Send one e-mail.

        Args:
            to_email: Recipient address
            subject: Subject line
            html_body: HTML body
        """
        ...
