"""Ingestion domain protocols."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TransferReporterProtocol(Protocol):
    """Entry point every probe reports through."""

    async def report(self, transfer_identity: str, account_id: str, byte_count: int) -> bool:
        """Forward the transfer to the ledger unless the identity was seen recently.

        Returns:
            True if the transfer was forwarded and the ledger accepted it.
        """
        ...
