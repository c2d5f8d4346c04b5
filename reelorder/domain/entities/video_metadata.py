# reelorder/domain/entities/video_metadata.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class VideoMetadata:
    """
    Technical attributes of one probed file, as reported by the probe tool.
    Every field defaults to zero/empty; the all-default value is what a failed
    probe produces, so callers never see ``None`` here.
    """
    video_codec: str = ""
    width: int = 0
    height: int = 0
    video_bitrate_kbps: float = 0.0
    audio_codec: str = ""
    audio_bitrate_kbps: int = 0
    frame_rate: float = 0.0
    duration_ms: int = 0

    @property
    def resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_METADATA


EMPTY_METADATA = VideoMetadata()
