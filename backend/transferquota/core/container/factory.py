"""Container factory.

Reads the settings and decides which adapter implementation backs each
protocol, then wires the domain services on top of them.
"""

from transferquota.adapters.accounts.static import StaticAccountDirectory
from transferquota.adapters.email.null import NullEmailSender
from transferquota.adapters.email.resend import ResendEmailSender
from transferquota.adapters.idempotency.in_memory import InMemoryIdempotencyStore
from transferquota.adapters.idempotency.redis import RedisIdempotencyStore
from transferquota.adapters.notifications.redis import RedisInAppNotifier
from transferquota.core.config import Settings
from transferquota.core.config.enums import IdempotencyBackend
from transferquota.core.container.container import Container
from transferquota.core.logging import logger
from transferquota.core.protocols import AccountDirectory, EmailSender, IdempotencyStore
from transferquota.domains.aggregation.aggregator import DownloadCountAggregator
from transferquota.domains.aggregation.repository import (
    PreferencesCounterSource,
    WatermarkRepository,
)
from transferquota.domains.ingestion.deduplicator import TransferDeduplicator
from transferquota.domains.notifications.dispatcher import NotificationDispatcher
from transferquota.domains.probes.registry import build_default_probes
from transferquota.domains.quota.admin import QuotaAdminService
from transferquota.domains.quota.ledger import TransferQuotaLedger
from transferquota.domains.quota.repository import (
    QuotaRepository,
    ThresholdSettingsRepository,
)
from transferquota.domains.reset.monthly import MonthlyResetJob


def create_container(settings: Settings) -> Container:
    """Build the container with environment-appropriate implementations.

    Args:
        settings: Application settings (from core/config)

    Returns:
        Fully constructed Container ready for use
    """
    # -----------------------------------------------------------------
    # Adapters
    # -----------------------------------------------------------------
    idempotency_store = _create_idempotency_store(settings)
    email_sender = _create_email_sender(settings)
    in_app_notifier = RedisInAppNotifier()
    account_directory = _create_account_directory(settings)
    counter_source = PreferencesCounterSource(
        table_name=settings.EXTERNAL_COUNTER_TABLE,
        app_id=settings.EXTERNAL_COUNTER_APP_ID,
        config_key=settings.EXTERNAL_COUNTER_KEY,
    )

    # -----------------------------------------------------------------
    # Notification dispatch and ledger
    # -----------------------------------------------------------------
    dispatcher = NotificationDispatcher(
        accounts=account_directory,
        in_app=in_app_notifier,
        email=email_sender,
        suppression=idempotency_store,
        suppression_ttl_seconds=settings.NOTIFICATION_SUPPRESSION_SECONDS,
        instance_name=settings.INSTANCE_NAME,
        app_url=settings.APP_FULL_URL,
    )
    quota_repo = QuotaRepository()
    settings_repo = ThresholdSettingsRepository()
    ledger = TransferQuotaLedger(
        quota_repo=quota_repo,
        settings_repo=settings_repo,
        dispatcher=dispatcher,
    )

    # -----------------------------------------------------------------
    # Ingestion: dedup layer and probes
    # -----------------------------------------------------------------
    deduplicator = TransferDeduplicator(
        ledger=ledger,
        store=idempotency_store,
        window_seconds=settings.DEDUP_WINDOW_SECONDS,
    )
    probes = build_default_probes(deduplicator)

    # -----------------------------------------------------------------
    # Scheduled jobs and administration
    # -----------------------------------------------------------------
    aggregator = DownloadCountAggregator(
        ledger=ledger,
        counter_source=counter_source,
        watermark_repo=WatermarkRepository(),
        average_size_bytes=settings.AVERAGE_DOWNLOAD_SIZE_BYTES,
    )
    reset_job = MonthlyResetJob(ledger=ledger)
    admin = QuotaAdminService(
        ledger=ledger,
        quota_repo=quota_repo,
        settings_repo=settings_repo,
    )

    return Container(
        idempotency_store=idempotency_store,
        email_sender=email_sender,
        in_app_notifier=in_app_notifier,
        account_directory=account_directory,
        counter_source=counter_source,
        dispatcher=dispatcher,
        ledger=ledger,
        deduplicator=deduplicator,
        probes=probes,
        aggregator=aggregator,
        reset_job=reset_job,
        admin=admin,
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _create_idempotency_store(settings: Settings) -> IdempotencyStore:
    """Shared Redis store, or a per-process table when configured."""
    if settings.IDEMPOTENCY_BACKEND == IdempotencyBackend.MEMORY:
        logger.info("Using in-memory idempotency store (per process)")
        return InMemoryIdempotencyStore(max_entries=settings.DEDUP_MAX_ENTRIES)
    return RedisIdempotencyStore()


def _create_email_sender(settings: Settings) -> EmailSender:
    """Resend when an API key is configured, otherwise a logging no-op."""
    if settings.RESEND_API_KEY:
        return ResendEmailSender(
            api_key=settings.RESEND_API_KEY,
            from_email=settings.RESEND_FROM_EMAIL,
        )
    logger.warning("RESEND_API_KEY not set, e-mail notifications will only be logged")
    return NullEmailSender()


def _create_account_directory(settings: Settings) -> AccountDirectory:
    if settings.ACCOUNT_DIRECTORY_FILE:
        return StaticAccountDirectory.from_json_file(settings.ACCOUNT_DIRECTORY_FILE)
    logger.warning("ACCOUNT_DIRECTORY_FILE not set, notifications have no recipients")
    return StaticAccountDirectory()
