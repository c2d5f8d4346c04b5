# reelorder/domain/enums/file_format.py
from __future__ import annotations

from enum import StrEnum


class VideoFormats(StrEnum):
    MP4 = "mp4"
    AVI = "avi"
    MKV = "mkv"
    MOV = "mov"
    WMV = "wmv"
    FLV = "flv"
    WEBM = "webm"


# Directory mode of the windowed tool scans every known container.
DEFAULT_VIDEO_EXTS: tuple[str, ...] = tuple(f.value for f in VideoFormats)

# The command-line tool only ever looked for MP4 files.
CLI_VIDEO_EXTS: tuple[str, ...] = (VideoFormats.MP4.value,)
