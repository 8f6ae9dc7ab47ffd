"""Notification domain test fixtures and helpers."""

import pytest

from transferquota.adapters.accounts.fake import FakeAccountDirectory
from transferquota.adapters.email.fake import FakeEmailSender
from transferquota.adapters.idempotency.fake import FakeIdempotencyStore
from transferquota.adapters.notifications.fake import FakeInAppNotifier
from transferquota.domains.notifications.dispatcher import NotificationDispatcher
from transferquota.schemas.notification import QuotaNotification, SubjectKind

GIB = 1024**3


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_notification(
    account_id: str = "alice",
    kind: SubjectKind = SubjectKind.WARNING,
    percent: float = 80.0,
    threshold: int = 80,
    usage_bytes: int = 8 * GIB,
    limit_bytes: int = 10 * GIB,
) -> QuotaNotification:
    return QuotaNotification(
        account_id=account_id,
        subject_kind=kind,
        percent=percent,
        threshold=threshold,
        usage_bytes=usage_bytes,
        limit_bytes=limit_bytes,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def accounts():
    directory = FakeAccountDirectory()
    directory.add("alice", email="alice@example.com", display_name="Alice")
    directory.add("root", email="root@example.com", display_name="Root", is_admin=True)
    return directory


@pytest.fixture
def in_app():
    return FakeInAppNotifier()


@pytest.fixture
def email():
    return FakeEmailSender()


@pytest.fixture
def suppression():
    return FakeIdempotencyStore()


@pytest.fixture
def dispatcher(accounts, in_app, email, suppression):
    return NotificationDispatcher(
        accounts=accounts,
        in_app=in_app,
        email=email,
        suppression=suppression,
        suppression_ttl_seconds=300,
        instance_name="Cloud",
        app_url="https://cloud.example.com",
    )
