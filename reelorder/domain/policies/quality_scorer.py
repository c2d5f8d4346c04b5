"""Quality scoring policies.

A score is a single number used only for ordering. Two formulas exist:

- ``AdditiveScorer``: weighted points per attribute (codec, resolution,
  bitrates, duration, file size). Backs the HTTP API and the settings default.
- ``MultiplicativeScorer``: pixel rate times bitrate, scaled by a codec
  factor. Backs the command-line default.

Both are pure: the same metadata and size always give the same score.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from reelorder.domain.entities.video_metadata import VideoMetadata
from reelorder.domain.enums.scoring_policy import ScoringPolicy

MIB = 1024 * 1024


class QualityScorer(Protocol):
    policy: ScoringPolicy

    def score(
        self,
        metadata: VideoMetadata,
        size_bytes: int,
        duration_ms: Optional[int] = None,
    ) -> float: ...


@dataclass(frozen=True)
class AdditiveScorer:
    """Points-based score; integer valued."""

    policy: ScoringPolicy = ScoringPolicy.additive

    def score(
        self,
        metadata: VideoMetadata,
        size_bytes: int,
        duration_ms: Optional[int] = None,
    ) -> int:
        dur = metadata.duration_ms if duration_ms is None else duration_ms

        points = 0
        points += 10 if "h264" in metadata.video_codec.lower() else 5
        if metadata.resolution == (1920, 1080):
            points += 20
        elif metadata.resolution == (1280, 720):
            points += 10
        else:
            points += 5
        points += int(metadata.video_bitrate_kbps // 1000)
        points += 10 if "aac" in metadata.audio_codec.lower() else 5
        points += int(metadata.audio_bitrate_kbps) // 32
        points += max(0, int(dur)) // 60_000           # one per full minute
        points += max(0, int(size_bytes)) // MIB       # one per full MiB
        return points


# codec_name -> multiplier; anything else is 1.0
CODEC_FACTORS: Dict[str, float] = {
    "h265": 1.5,
    "hevc": 1.5,
    "h264": 1.2,
    "avc": 1.2,
    "vp9": 1.3,
}


@dataclass(frozen=True)
class MultiplicativeScorer:
    """width * height * fps * bitrate(bps) / 1e6, times the codec factor."""

    policy: ScoringPolicy = ScoringPolicy.multiplicative

    def score(
        self,
        metadata: VideoMetadata,
        size_bytes: int,
        duration_ms: Optional[int] = None,
    ) -> float:
        # size and duration do not take part in this formula
        bitrate_bps = metadata.video_bitrate_kbps * 1000.0
        quality = (metadata.width * metadata.height * metadata.frame_rate * bitrate_bps) / 1_000_000
        return quality * CODEC_FACTORS.get(metadata.video_codec.lower(), 1.0)


_SCORERS: Dict[ScoringPolicy, QualityScorer] = {
    ScoringPolicy.additive: AdditiveScorer(),
    ScoringPolicy.multiplicative: MultiplicativeScorer(),
}


def get_scorer(policy: ScoringPolicy | str = ScoringPolicy.additive) -> QualityScorer:
    return _SCORERS[ScoringPolicy(policy)]
