"""Fake transfer quota ledger for testing.

Records all calls for assertions without touching the database.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from transferquota.core.config import settings
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol
from transferquota.schemas.transfer_quota import QuotaRecord, QuotaThresholds


class FakeTransferQuotaLedger(TransferQuotaLedgerProtocol):
    """Test implementation of TransferQuotaLedgerProtocol.

    Usage:
        ledger = FakeTransferQuotaLedger()
        await dedup.report("node:1:read", "alice", 1024)

        assert ledger.transfers == [("alice", 1024)]
        assert ledger.added["alice"] == 1024
    """

    def __init__(self, succeed: bool = True) -> None:
        """Initialize empty recording state.

        Args:
            succeed: Value returned by every write operation.
        """
        self.succeed = succeed
        self.transfers: list[tuple[str, int]] = []
        self.added: dict[str, int] = defaultdict(int)
        self.limits: dict[str, int] = {}
        self.forced: list[Optional[str]] = []  # None marks force_check_all
        self.resets: list[Optional[str]] = []  # None marks reset_all

    async def get_quota(self, account_id: str) -> Optional[QuotaRecord]:
        """Build a record from the recorded calls."""
        return QuotaRecord(
            account_id=account_id,
            monthly_limit_bytes=self.limits.get(account_id, 0),
            current_usage_bytes=self.added.get(account_id, 0),
        )

    async def get_thresholds(self) -> Optional[QuotaThresholds]:
        """Return the configured default thresholds."""
        return QuotaThresholds(
            warning=settings.DEFAULT_WARNING_THRESHOLD,
            critical=settings.DEFAULT_CRITICAL_THRESHOLD,
        )

    async def set_quota(self, account_id: str, limit_bytes: int) -> bool:
        """Record a limit change."""
        self.limits[account_id] = limit_bytes
        return self.succeed

    async def add_transfer(self, account_id: str, byte_count: int) -> bool:
        """Record a transfer."""
        self.transfers.append((account_id, byte_count))
        if self.succeed:
            self.added[account_id] += byte_count
        return self.succeed

    async def force_check(self, account_id: str) -> bool:
        """Record a forced check."""
        self.forced.append(account_id)
        return self.succeed

    async def force_check_all(self) -> bool:
        """Record a forced check of every account."""
        self.forced.append(None)
        return self.succeed

    async def reset_usage(self, account_id: str) -> bool:
        """Record a reset."""
        self.resets.append(account_id)
        return self.succeed

    async def reset_all(self) -> bool:
        """Record a full reset."""
        self.resets.append(None)
        return self.succeed

    def clear(self) -> None:
        """Reset all recorded state."""
        self.transfers.clear()
        self.added.clear()
        self.limits.clear()
        self.forced.clear()
        self.resets.clear()
