"""In-app notification adapters."""

from transferquota.adapters.notifications.fake import FakeInAppNotifier
from transferquota.adapters.notifications.redis import RedisInAppNotifier

__all__ = ["FakeInAppNotifier", "RedisInAppNotifier"]
