"""Probe for direct file reads reported by the host's file events."""

from transferquota.domains.ingestion.identity import node_identity
from transferquota.domains.probes.base import BaseProbe
from transferquota.domains.probes.types import TransferDirection, TransferObservation


class NodeReadProbe(BaseProbe):
    """Direct read and filesystem read events.

    Identity is ``node:<file_id>:<action>``; reads without a file id fall
    back to a path signature.
    """

    name = "node_read"

    def accepts(self, observation: TransferObservation) -> bool:
        return (
            observation.direction == TransferDirection.DOWNLOAD
            and super().accepts(observation)
        )

    def identity_for(self, observation: TransferObservation, account_id: str) -> str:
        if observation.file_id:
            return node_identity(observation.file_id, observation.action)
        return self.signature(observation, account_id, observation.action)
