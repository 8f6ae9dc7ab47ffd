"""Probe for protocol-level (WebDAV-style) GET requests."""

from transferquota.domains.ingestion.identity import node_identity
from transferquota.domains.probes.base import BaseProbe
from transferquota.domains.probes.types import TransferObservation


class ProtocolGetProbe(BaseProbe):
    """Successful GET responses served by the file protocol layer.

    Only 2xx responses for files count. With a known file id the identity
    matches ``NodeReadProbe`` so both sightings of one download collapse;
    otherwise a signature of path, user agent and time bucket is used.
    """

    name = "protocol_get"

    def accepts(self, observation: TransferObservation) -> bool:
        return observation.status_code is not None and super().accepts(observation)

    def identity_for(self, observation: TransferObservation, account_id: str) -> str:
        if observation.file_id:
            return node_identity(observation.file_id, observation.action)
        return self.signature(observation, account_id, observation.user_agent or "")
