"""Probe for inbound writes (file created or updated)."""

from transferquota.domains.ingestion.identity import node_identity
from transferquota.domains.probes.base import BaseProbe
from transferquota.domains.probes.types import TransferDirection, TransferObservation


class UploadProbe(BaseProbe):
    """Inbound traffic counts against the same monthly quota.

    Identity is ``node:<file_id>:write:<mtime>`` so each new version of a
    file counts once, however many write events the host emits for it.
    """

    name = "upload"

    def accepts(self, observation: TransferObservation) -> bool:
        return observation.direction == TransferDirection.UPLOAD and super().accepts(observation)

    def identity_for(self, observation: TransferObservation, account_id: str) -> str:
        mtime = str(observation.modified_at) if observation.modified_at is not None else ""
        if observation.file_id:
            return node_identity(observation.file_id, "write", mtime)
        return self.signature(observation, account_id, "write", mtime)
