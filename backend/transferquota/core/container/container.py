"""Dependency Injection Container.

The container is an immutable dataclass holding the wired services. It has
no construction logic; that belongs in the factory.

Design principles:
- Container serves, factory builds
- Fail fast: all construction at startup
- Testing: construct directly with fakes
"""

from dataclasses import dataclass, replace
from typing import Any

from transferquota.core.protocols import (
    AccountDirectory,
    EmailSender,
    IdempotencyStore,
    InAppNotifier,
)
from transferquota.domains.aggregation.aggregator import DownloadCountAggregator
from transferquota.domains.aggregation.protocols import DownloadCounterSourceProtocol
from transferquota.domains.ingestion.deduplicator import TransferDeduplicator
from transferquota.domains.notifications.protocols import NotificationDispatcherProtocol
from transferquota.domains.probes.registry import ProbeRegistry
from transferquota.domains.quota.admin import QuotaAdminService
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol
from transferquota.domains.reset.monthly import MonthlyResetJob


@dataclass(frozen=True)
class Container:
    """Immutable container holding every wired service.

    Usage:
        # Worker and CLI: use the global container built by the factory
        from transferquota.core import container as container_mod
        await container_mod.container.aggregator.run()

        # Testing: construct directly with fakes
        test_container = Container(ledger=FakeTransferQuotaLedger(), ...)
    """

    # Infrastructure adapters
    idempotency_store: IdempotencyStore
    email_sender: EmailSender
    in_app_notifier: InAppNotifier
    account_directory: AccountDirectory
    counter_source: DownloadCounterSourceProtocol

    # Core
    dispatcher: NotificationDispatcherProtocol
    ledger: TransferQuotaLedgerProtocol
    deduplicator: TransferDeduplicator
    probes: ProbeRegistry

    # Jobs and administration
    aggregator: DownloadCountAggregator
    reset_job: MonthlyResetJob
    admin: QuotaAdminService

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced.

        Useful for testing when you want to override just one or two
        dependencies.
        """
        return replace(self, **changes)
