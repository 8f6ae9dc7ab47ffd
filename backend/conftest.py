"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and
transferquota/), making its fixtures available to centralized tests AND
colocated domain and adapter tests.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any transferquota module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SQLALCHEMY_ASYNC_DATABASE_URI", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("IDEMPOTENCY_BACKEND", "memory")
os.environ.setdefault("TEMPORAL_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


# ---------------------------------------------------------------------------
# Shared fake fixtures: individual protocol fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_idempotency_store():
    """Fake IdempotencyStore that records every claim."""
    from transferquota.adapters.idempotency.fake import FakeIdempotencyStore

    return FakeIdempotencyStore()


@pytest.fixture
def fake_email_sender():
    """Fake EmailSender that records sent messages."""
    from transferquota.adapters.email.fake import FakeEmailSender

    return FakeEmailSender()


@pytest.fixture
def fake_in_app_notifier():
    """Fake InAppNotifier that records notices."""
    from transferquota.adapters.notifications.fake import FakeInAppNotifier

    return FakeInAppNotifier()


@pytest.fixture
def fake_account_directory():
    """Fake AccountDirectory with no accounts; add them with .add()."""
    from transferquota.adapters.accounts.fake import FakeAccountDirectory

    return FakeAccountDirectory()


@pytest.fixture
def fake_ledger():
    """Fake ledger that records every call."""
    from transferquota.domains.quota.fakes.ledger import FakeTransferQuotaLedger

    return FakeTransferQuotaLedger()


@pytest.fixture
def fake_quota_repo():
    """In-memory quota repository."""
    from transferquota.domains.quota.fakes.repository import FakeQuotaRepository

    return FakeQuotaRepository()


@pytest.fixture
def fake_counter_source():
    """In-memory external download counters."""
    from transferquota.domains.aggregation.fakes.repository import FakeDownloadCounterSource

    return FakeDownloadCounterSource()


# ---------------------------------------------------------------------------
# Composite container fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def test_container(
    fake_idempotency_store,
    fake_email_sender,
    fake_in_app_notifier,
    fake_account_directory,
    fake_ledger,
    fake_quota_repo,
    fake_counter_source,
):
    """A Container whose adapters and ledger are fakes.

    The services on top (dispatcher, deduplicator, probes, jobs, admin) are
    real and wired to those fakes.

    For partial overrides, use container.replace():
        other = test_container.replace(ledger=FakeTransferQuotaLedger(succeed=False))
    """
    from transferquota.core.container import Container
    from transferquota.domains.aggregation.aggregator import DownloadCountAggregator
    from transferquota.domains.aggregation.fakes.repository import FakeWatermarkRepository
    from transferquota.domains.ingestion.deduplicator import TransferDeduplicator
    from transferquota.domains.notifications.dispatcher import NotificationDispatcher
    from transferquota.domains.probes.registry import build_default_probes
    from transferquota.domains.quota.admin import QuotaAdminService
    from transferquota.domains.quota.fakes.repository import FakeThresholdSettingsRepository
    from transferquota.domains.reset.monthly import MonthlyResetJob

    deduplicator = TransferDeduplicator(ledger=fake_ledger, store=fake_idempotency_store)

    return Container(
        idempotency_store=fake_idempotency_store,
        email_sender=fake_email_sender,
        in_app_notifier=fake_in_app_notifier,
        account_directory=fake_account_directory,
        counter_source=fake_counter_source,
        dispatcher=NotificationDispatcher(
            accounts=fake_account_directory,
            in_app=fake_in_app_notifier,
            email=fake_email_sender,
            suppression=fake_idempotency_store,
        ),
        ledger=fake_ledger,
        deduplicator=deduplicator,
        probes=build_default_probes(deduplicator),
        aggregator=DownloadCountAggregator(
            ledger=fake_ledger,
            counter_source=fake_counter_source,
            watermark_repo=FakeWatermarkRepository(),
        ),
        reset_job=MonthlyResetJob(ledger=fake_ledger),
        admin=QuotaAdminService(
            ledger=fake_ledger,
            quota_repo=fake_quota_repo,
            settings_repo=FakeThresholdSettingsRepository(warning=80, critical=95),
        ),
    )
