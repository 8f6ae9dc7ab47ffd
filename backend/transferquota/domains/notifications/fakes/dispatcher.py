"""Fake notification dispatcher for testing."""

from typing import Optional

from transferquota.domains.notifications.protocols import NotificationDispatcherProtocol
from transferquota.domains.notifications.types import DispatchResult
from transferquota.schemas.notification import QuotaNotification


class FakeNotificationDispatcher(NotificationDispatcherProtocol):
    """Test implementation of NotificationDispatcherProtocol.

    Usage:
        dispatcher = FakeNotificationDispatcher()
        ledger = TransferQuotaLedger(..., dispatcher=dispatcher)
        await ledger.add_transfer("alice", 8 * GIB)

        assert dispatcher.subjects_for("alice") == ["warning_threshold_reached"]
    """

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        """Initialize with no dispatched notifications."""
        self.dispatched: list[QuotaNotification] = []
        self.fail_with = fail_with

    async def dispatch(self, notification: QuotaNotification) -> DispatchResult:
        """Record the notification."""
        self.dispatched.append(notification)
        if self.fail_with is not None:
            raise self.fail_with
        return DispatchResult(in_app_sent=True)

    def subjects_for(self, account_id: str) -> list[str]:
        """Subjects dispatched for one account, in order."""
        return [n.subject for n in self.dispatched if n.account_id == account_id]

    def clear(self) -> None:
        """Forget every dispatched notification."""
        self.dispatched.clear()
