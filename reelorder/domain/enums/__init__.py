from reelorder.domain.enums.file_format import VideoFormats, DEFAULT_VIDEO_EXTS, CLI_VIDEO_EXTS
from reelorder.domain.enums.scoring_policy import ScoringPolicy
from reelorder.domain.enums.sort_strategy import SortStrategy
__all__ = [
    "VideoFormats",
    "DEFAULT_VIDEO_EXTS",
    "CLI_VIDEO_EXTS",
    "ScoringPolicy",
    "SortStrategy",
]
