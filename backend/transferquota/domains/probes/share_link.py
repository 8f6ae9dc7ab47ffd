"""Probe for downloads through public share links."""

from typing import Optional

from transferquota.domains.ingestion.identity import normalize_path
from transferquota.domains.probes.base import BaseProbe
from transferquota.domains.probes.types import TransferObservation


class ShareLinkProbe(BaseProbe):
    """Public share downloads, billed to the share owner.

    Identity is ``share:<token>:<file_id or path>``.
    """

    name = "share_link"

    def accepts(self, observation: TransferObservation) -> bool:
        return bool(observation.share_token) and super().accepts(observation)

    def account_for(self, observation: TransferObservation) -> Optional[str]:
        return observation.share_owner_id

    def identity_for(self, observation: TransferObservation, account_id: str) -> str:
        target = observation.file_id or normalize_path(observation.path or "")
        return f"share:{observation.share_token}:{target}"
