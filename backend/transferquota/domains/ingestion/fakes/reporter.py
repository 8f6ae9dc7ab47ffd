"""Fake transfer reporter for probe tests."""

from typing import Optional

from transferquota.domains.ingestion.protocols import TransferReporterProtocol


class FakeTransferReporter(TransferReporterProtocol):
    """Records every report without deduplicating.

    Usage:
        reporter = FakeTransferReporter()
        probe = NodeReadProbe(reporter)
        await probe.observe(observation)

        assert reporter.reports == [("node:42:read", "alice", 1024)]
    """

    def __init__(self, fail_with: Optional[Exception] = None) -> None:
        """Initialize with no reports."""
        self.reports: list[tuple[str, str, int]] = []
        self.fail_with = fail_with

    async def report(self, transfer_identity: str, account_id: str, byte_count: int) -> bool:
        """Record the report."""
        if self.fail_with is not None:
            raise self.fail_with
        self.reports.append((transfer_identity, account_id, byte_count))
        return True

    @property
    def identities(self) -> list[str]:
        """Reported identities, in order."""
        return [identity for identity, _, _ in self.reports]
