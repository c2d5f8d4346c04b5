from __future__ import annotations
from pathlib import Path
from typing import Protocol
from reelorder.domain.entities.video_metadata import VideoMetadata

class MediaProbePort(Protocol):
    # Implementations must not raise: a failed probe returns VideoMetadata().
    def probe(self, path: Path) -> VideoMetadata: ...
