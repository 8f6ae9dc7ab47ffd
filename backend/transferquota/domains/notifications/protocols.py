"""Notification domain protocols."""

from typing import Protocol, runtime_checkable

from transferquota.domains.notifications.types import DispatchResult
from transferquota.schemas.notification import QuotaNotification


@runtime_checkable
class NotificationDispatcherProtocol(Protocol):
    """Sends every channel of one threshold notification.

    Never raises: each channel failure is logged and reported in the result.
    """

    async def dispatch(self, notification: QuotaNotification) -> DispatchResult:
        """Send the in-app notice and e-mails for one fired threshold."""
        ...
