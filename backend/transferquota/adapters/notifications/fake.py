"""Fake in-app notifier for testing."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from transferquota.schemas.notification import QuotaNotification


class FakeInAppNotifier:
    """Test implementation of InAppNotifier.

    Records every delivered notice; raises ``fail_with`` instead when set.

    Usage:
        fake = FakeInAppNotifier()
        ...
        assert fake.subjects_for("alice") == ["warning_threshold_reached"]
    """

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        """Initialize with no notices."""
        self.notifications: list["QuotaNotification"] = []
        self.fail_with = fail_with

    async def notify(self, notification: "QuotaNotification") -> None:
        """Record the notice."""
        if self.fail_with is not None:
            raise self.fail_with
        self.notifications.append(notification)

    # Test helpers

    def subjects_for(self, account_id: str) -> list[str]:
        """Subjects delivered to one account, in order."""
        return [n.subject for n in self.notifications if n.account_id == account_id]

    def clear(self) -> None:
        """Forget every recorded notice."""
        self.notifications.clear()
