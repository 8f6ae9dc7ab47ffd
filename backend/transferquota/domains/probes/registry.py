"""Registry of the probes a host can feed observations to."""

from typing import Iterable, Optional

from transferquota.domains.ingestion.protocols import TransferReporterProtocol
from transferquota.domains.probes.base import Probe
from transferquota.domains.probes.node_read import NodeReadProbe
from transferquota.domains.probes.protocol_get import ProtocolGetProbe
from transferquota.domains.probes.response_inspection import ResponseInspectionProbe
from transferquota.domains.probes.share_link import ShareLinkProbe
from transferquota.domains.probes.types import TransferObservation
from transferquota.domains.probes.upload import UploadProbe


class ProbeRegistry:
    """Probes by name."""

    def __init__(self, probes: Iterable[Probe] = ()) -> None:
        """Initialize with the given probes."""
        self._probes: dict[str, Probe] = {}
        for probe in probes:
            self.register(probe)

    def register(self, probe: Probe) -> None:
        """Add a probe; a probe with the same name is replaced."""
        self._probes[probe.name] = probe

    def get(self, name: str) -> Optional[Probe]:
        """Probe by name, or None."""
        return self._probes.get(name)

    @property
    def names(self) -> list[str]:
        return sorted(self._probes)

    async def observe(self, name: str, observation: TransferObservation) -> bool:
        """Feed an observation to one probe; unknown names report nothing."""
        probe = self._probes.get(name)
        if probe is None:
            return False
        return await probe.observe(observation)


def build_default_probes(
    reporter: TransferReporterProtocol, bucket_seconds: Optional[int] = None
) -> ProbeRegistry:
    """Registry with every built-in probe variant reporting through ``reporter``."""
    kwargs = {"bucket_seconds": bucket_seconds} if bucket_seconds else {}
    return ProbeRegistry(
        [
            NodeReadProbe(reporter, **kwargs),
            ProtocolGetProbe(reporter, **kwargs),
            ShareLinkProbe(reporter, **kwargs),
            ResponseInspectionProbe(reporter, **kwargs),
            UploadProbe(reporter, **kwargs),
        ]
    )
