# reelorder/services/api/deps.py
from __future__ import annotations

from reelorder.domain.ports.probe import MediaProbePort
from reelorder.services.probe.ffprobe_adapter import FFprobeAdapter


def get_media_probe() -> MediaProbePort:
    """
    Provide a MediaProbePort implementation (ffprobe) via DI.
    Tests override this with an InMemoryProbe.
    """
    return FFprobeAdapter()
