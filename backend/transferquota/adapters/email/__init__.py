"""E-mail adapters."""

from transferquota.adapters.email.fake import FakeEmailSender
from transferquota.adapters.email.null import NullEmailSender
from transferquota.adapters.email.resend import ResendEmailSender

__all__ = ["FakeEmailSender", "NullEmailSender", "ResendEmailSender"]
