"""Probe that inspects outgoing HTTP responses in host middleware."""

from typing import Optional

from transferquota.domains.probes.base import BaseProbe
from transferquota.domains.probes.types import TransferObservation

_TEXTUAL_TYPES = (
    "text/",
    "application/json",
    "application/xml",
    "application/javascript",
    "application/xhtml",
)


def looks_like_download(observation: TransferObservation) -> bool:
    """Attachment disposition or a non-textual content type."""
    disposition = (observation.header("Content-Disposition") or "").lower()
    if disposition.startswith("attachment"):
        return True
    content_type = (observation.header("Content-Type") or "").lower().strip()
    if not content_type:
        return False
    return not content_type.startswith(_TEXTUAL_TYPES)


class ResponseInspectionProbe(BaseProbe):
    """Download-looking 2xx responses with a positive ``Content-Length``.

    Identity is a signature of the normalized URI, the account and the time
    bucket, since middleware rarely knows the file id.
    """

    name = "response_inspection"

    def accepts(self, observation: TransferObservation) -> bool:
        return (
            observation.status_code is not None
            and super().accepts(observation)
            and looks_like_download(observation)
        )

    def bytes_for(self, observation: TransferObservation) -> Optional[int]:
        raw = observation.header("Content-Length")
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            self._logger.debug(f"Unparseable Content-Length {raw!r}")
            return None

    def identity_for(self, observation: TransferObservation, account_id: str) -> str:
        return self.signature(observation, account_id)
