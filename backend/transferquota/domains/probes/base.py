"""Probe capability interface and shared base.

Every detection mechanism is a ``Probe``. The shared base turns an
observation into ``(identity, account, bytes)`` and reports it through the
deduplicator; variants only decide whether an observation applies and how
to identify it. A probe never raises into the host's request path.
"""

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from transferquota.core.logging import logger
from transferquota.domains.ingestion.identity import DEFAULT_BUCKET_SECONDS, signature_identity
from transferquota.domains.ingestion.protocols import TransferReporterProtocol
from transferquota.domains.probes.types import TransferObservation


@runtime_checkable
class Probe(Protocol):
    """A detection point for transfers."""

    name: str

    async def observe(self, observation: TransferObservation) -> bool:
        """Report the observed transfer if it applies.

        Returns:
            True if a transfer was forwarded to the ledger. Never raises.
        """
        ...


class BaseProbe(ABC):
    """Shared observe pipeline for probe variants."""

    name = "probe"

    def __init__(
        self,
        reporter: TransferReporterProtocol,
        bucket_seconds: int = DEFAULT_BUCKET_SECONDS,
    ) -> None:
        """Initialize the probe.

        Args:
            reporter: Deduplicating entry point into the ledger
            bucket_seconds: Time bucket width for signature identities
        """
        self._reporter = reporter
        self._bucket_seconds = bucket_seconds
        self._logger = logger.with_context(probe=self.name)

    async def observe(self, observation: TransferObservation) -> bool:
        """Report the observation. Every error is logged and swallowed."""
        try:
            if not self.accepts(observation):
                return False

            account_id = self.account_for(observation)
            byte_count = self.bytes_for(observation)
            if not account_id:
                self._logger.debug("Observation without an owning account ignored")
                return False
            if not byte_count or byte_count <= 0:
                self._logger.debug(f"Observation for {account_id} without bytes ignored")
                return False

            identity = self.identity_for(observation, account_id)
            return await self._reporter.report(identity, account_id, byte_count)
        except Exception:
            self._logger.error("Probe failed to report transfer", exc_info=True)
            return False

    # ------------------------------------------------------------------
    # Variant hooks
    # ------------------------------------------------------------------

    def accepts(self, observation: TransferObservation) -> bool:
        """Whether this probe handles the observation."""
        return observation.is_success and not observation.is_directory

    def account_for(self, observation: TransferObservation) -> Optional[str]:
        """Account billed for the transfer."""
        return observation.account_id

    def bytes_for(self, observation: TransferObservation) -> Optional[int]:
        """Bytes transferred."""
        return observation.byte_count

    @abstractmethod
    def identity_for(self, observation: TransferObservation, account_id: str) -> str:
        """Transfer identity used for deduplication."""

    def signature(self, observation: TransferObservation, account_id: str, *extra: str) -> str:
        """Path/time signature for observations without a stable id."""
        return signature_identity(
            account_id,
            observation.path or "",
            *extra,
            moment=observation.observed_at,
            bucket_seconds=self._bucket_seconds,
        )
