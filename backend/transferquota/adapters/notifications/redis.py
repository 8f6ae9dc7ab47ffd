"""Redis-backed in-app notifier.

Each notice is published on ``notifications:<account_id>`` for live
listeners and pushed onto a capped per-account feed list so the host UI can
show notices that arrived while nobody was listening.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Optional

from redis.asyncio import Redis

from transferquota.core.datetime_utils import utc_now
from transferquota.core.redis_client import redis_client

if TYPE_CHECKING:
    from transferquota.schemas.notification import QuotaNotification


class RedisInAppNotifier:
    """InAppNotifier implementation over Redis pub/sub plus a feed list."""

    CHANNEL_NAMESPACE = "notifications"
    FEED_PREFIX = "transferquota:feed"
    FEED_LENGTH = 50

    def __init__(self, client: Optional[Redis] = None, app_id: str = "transferquota") -> None:
        """Initialize the notifier.

        Args:
            client: Redis client to use. Defaults to the shared pooled client.
            app_id: Application id stamped on every notice.
        """
        self._client = client
        self.app_id = app_id

    @property
    def client(self) -> Redis:
        return self._client if self._client is not None else redis_client.client

    @classmethod
    def make_channel(cls, account_id: str) -> str:
        """Build the channel name ``notifications:<account_id>``."""
        return f"{cls.CHANNEL_NAMESPACE}:{account_id}"

    @classmethod
    def make_feed_key(cls, account_id: str) -> str:
        """Build the feed list key ``transferquota:feed:<account_id>``."""
        return f"{cls.FEED_PREFIX}:{account_id}"

    async def notify(self, notification: "QuotaNotification") -> None:
        """Publish the notice and append it to the account's feed."""
        message = json.dumps(
            {
                "app": self.app_id,
                "user": notification.account_id,
                "subject": notification.subject,
                "parameters": notification.in_app_payload(),
                "created_at": utc_now().isoformat(),
            }
        )
        feed_key = self.make_feed_key(notification.account_id)
        await self.client.lpush(feed_key, message)
        await self.client.ltrim(feed_key, 0, self.FEED_LENGTH - 1)
        await self.client.publish(self.make_channel(notification.account_id), message)
