"""Quota domain protocols.

TransferQuotaLedgerProtocol: singleton owning every write to the quota table.
"""

from typing import Optional, Protocol, runtime_checkable

from transferquota.schemas.transfer_quota import QuotaRecord, QuotaThresholds


@runtime_checkable
class TransferQuotaLedgerProtocol(Protocol):
    """Durable per-account transfer accounting with one-shot threshold latches.

    Owns its own DB sessions internally; callers never pass a session.
    Storage failures are logged and reported as ``False`` (or ``None`` for
    reads); they never raise past the ledger.
    """

    async def get_quota(self, account_id: str) -> Optional[QuotaRecord]:
        """Get the record (untracked default if none); None on storage failure."""
        ...

    async def get_thresholds(self) -> Optional[QuotaThresholds]:
        """Get the global thresholds, None on storage failure."""
        ...

    async def set_quota(self, account_id: str, limit_bytes: int) -> bool:
        """Set the monthly limit and re-evaluate thresholds against the new limit."""
        ...

    async def add_transfer(self, account_id: str, byte_count: int) -> bool:
        """Add bytes to a tracked account's usage and fire any crossed threshold."""
        ...

    async def force_check(self, account_id: str) -> bool:
        """Clear both latches and re-evaluate current usage."""
        ...

    async def force_check_all(self) -> bool:
        """Run ``force_check`` for every known account."""
        ...

    async def reset_usage(self, account_id: str) -> bool:
        """Zero usage and latches of one account."""
        ...

    async def reset_all(self) -> bool:
        """Zero usage and latches of every account."""
        ...
