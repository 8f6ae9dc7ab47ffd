"""Resend e-mail adapter.

The Resend SDK is synchronous, so each send runs in a worker thread.
"""

import asyncio

import resend
from resend.exceptions import ResendError

from transferquota.core.exceptions import EmailDeliveryError
from transferquota.core.logging import logger


class ResendEmailSender:
    """EmailSender implementation backed by Resend."""

    def __init__(self, api_key: str, from_email: str) -> None:
        """Initialize the sender.

        Args:
            api_key: Resend API key
            from_email: Sender address
        """
        self.api_key = api_key
        self.from_email = from_email

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        """Send one e-mail.

        Raises:
            EmailDeliveryError: If Resend rejects the message or cannot be reached
        """
        params = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "html": html_body,
        }

        def _send_sync():
            resend.api_key = self.api_key
            return resend.Emails.send(params)

        try:
            await asyncio.to_thread(_send_sync)
        except ResendError as e:
            logger.error(f"Resend rejected e-mail to {to_email}: {e.code} {e.message}")
            raise EmailDeliveryError(
                to_email, f"Resend rejected e-mail to {to_email}: {e.code}"
            ) from e
        except Exception as e:
            logger.error(f"Could not reach Resend API for {to_email}: {e}")
            raise EmailDeliveryError(to_email) from e
