"""No-op e-mail sender for local development (no Resend key configured)."""

from transferquota.core.logging import logger


class NullEmailSender:
    """Logs e-mails instead of sending them."""

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        """Log the e-mail subject and recipient."""
        logger.info(f"[NullEmailSender] Would send '{subject}' to {to_email}")
