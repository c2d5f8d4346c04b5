from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

from reelorder.domain.entities.video_metadata import VideoMetadata


@dataclass(frozen=True)
class ScoredEntry:
    """One playlist candidate: absolute path + probe result + size + derived score."""
    path: str
    metadata: VideoMetadata
    size_bytes: int
    score: float

    @property
    def duration_ms(self) -> int:
        return self.metadata.duration_ms

    @property
    def name(self) -> str:
        return PurePath(self.path).name
