"""InAppNotifier protocol for notices shown inside the host platform."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from transferquota.schemas.notification import QuotaNotification


@runtime_checkable
class InAppNotifier(Protocol):
    """Delivers a threshold notice to the account's in-app notification feed."""

    async def notify(self, notification: "QuotaNotification") -> None:
        """Deliver one notice. Raises on transport failure."""
        ...
