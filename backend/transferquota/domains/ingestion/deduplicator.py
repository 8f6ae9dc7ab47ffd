"""Transfer deduplicator.

Several probes often observe the same physical transfer. Each report carries
a transfer identity; the first report of an identity within the window is
forwarded to the ledger, later ones are dropped. Claims live in the shared
idempotency store under the ``transfer`` namespace, so deduplication holds
across workers when the store is Redis and per process when it is in memory.
"""

from transferquota.core.config import settings
from transferquota.core.exceptions import InvalidTransferError
from transferquota.core.logging import logger
from transferquota.core.protocols import IdempotencyStore
from transferquota.domains.ingestion.protocols import TransferReporterProtocol
from transferquota.domains.quota.protocols import TransferQuotaLedgerProtocol

DEDUP_NAMESPACE = "transfer"


class TransferDeduplicator(TransferReporterProtocol):
    """Forwards each transfer identity to the ledger at most once per window."""

    def __init__(
        self,
        ledger: TransferQuotaLedgerProtocol,
        store: IdempotencyStore,
        window_seconds: int = settings.DEDUP_WINDOW_SECONDS,
    ) -> None:
        """Initialize the deduplicator.

        Args:
            ledger: Ledger receiving forwarded transfers
            store: Shared idempotency store
            window_seconds: How long an identity suppresses repeats
        """
        self._ledger = ledger
        self._store = store
        self._window = window_seconds

    async def report(self, transfer_identity: str, account_id: str, byte_count: int) -> bool:
        """Forward a transfer unless its identity is inside the window.

        Raises:
            InvalidTransferError: If the account is empty, the byte count
                negative, or the identity missing
        """
        if not account_id:
            raise InvalidTransferError("Transfer report without an account id")
        if not transfer_identity:
            raise InvalidTransferError("Transfer report without an identity")
        if byte_count < 0:
            raise InvalidTransferError(f"Negative byte count {byte_count} for {account_id}")

        log = logger.with_context(account_id=account_id, transfer_identity=transfer_identity)

        try:
            first_sighting = await self._store.claim(
                DEDUP_NAMESPACE, transfer_identity, self._window
            )
        except Exception:
            # Store failure forwards anyway; a double count is the accepted risk
            log.warning("Dedup store unavailable, forwarding without dedup", exc_info=True)
            first_sighting = True

        if not first_sighting:
            log.debug("Duplicate transfer report dropped")
            return False

        forwarded = await self.add_user_transfer(account_id, byte_count)
        if not forwarded:
            await self._release(transfer_identity, log)
        return forwarded

    async def add_user_transfer(self, account_id: str, byte_count: int) -> bool:
        """Post-dedup entry point into the ledger."""
        return await self._ledger.add_transfer(account_id, byte_count)

    async def _release(self, transfer_identity: str, log) -> None:
        """Drop the claim of a rejected transfer so a later report can bill it."""
        try:
            await self._store.release(DEDUP_NAMESPACE, transfer_identity)
        except Exception:
            log.warning("Could not release dedup claim after ledger rejection", exc_info=True)
