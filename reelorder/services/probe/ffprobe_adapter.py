# reelorder/services/probe/ffprobe_adapter.py
from __future__ import annotations

import re
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from reelorder.common.settings import get_settings
from reelorder.common.logging import get_logger
from reelorder.domain.entities.video_metadata import EMPTY_METADATA, VideoMetadata
from reelorder.domain.ports.probe import MediaProbePort

logger = get_logger(__name__)

# Fields requested from ffprobe. Stream entries cover both the video and the
# audio stream; codec_type tells them apart in the output.
STREAM_ENTRIES = ("codec_type", "codec_name", "width", "height", "bit_rate", "avg_frame_rate")
FORMAT_ENTRIES = ("duration",)

_SECTION_RE = re.compile(r"\[(STREAM|FORMAT)\](.*?)\[/\1\]", re.DOTALL)


class FFprobeError(RuntimeError):
    """Adapter-level error for probe failures. Never leaves FFprobeAdapter.probe()."""

    def __init__(self, message: str, stderr: Optional[str] = None, rc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.stderr = stderr
        self.rc = rc

    def __str__(self) -> str:
        return self.message if self.rc is None else f"{self.message} (rc={self.rc})"


def build_ffprobe_cmd(ffprobe_bin: str, input_path: str | Path, *, log_level: str = "error") -> List[str]:
    """
    One ffprobe call per file: selected stream + format fields as
    sectioned key=value text.
    """
    entries = f"stream={','.join(STREAM_ENTRIES)}:format={','.join(FORMAT_ENTRIES)}"
    return [
        ffprobe_bin,
        "-v", log_level,
        "-show_entries", entries,
        "-of", "default=noprint_wrappers=0",
        "--",  # stop option parsing in case of weird filenames
        str(input_path),
    ]


class FFprobeAdapter(MediaProbePort):
    """
    MediaProbePort backed by the `ffprobe` executable.
    Safe for use from ThreadManager (I/O-bound). Any failure (missing binary,
    timeout, non-zero exit) is logged and yields the zero-valued metadata.
    """

    def __init__(self, ffprobe_bin: Optional[str] = None, timeout_sec: Optional[int] = None,
                 log_level: Optional[str] = None):
        cfg = get_settings()
        candidate = ffprobe_bin or cfg.ffprobe.bin
        # resolve absolute path for nicer logs; a missing binary surfaces per file
        self.ffprobe_bin = shutil.which(candidate) or candidate
        self.timeout_sec = int(timeout_sec or cfg.ffprobe.timeout_sec or 30)
        self.log_level = log_level or cfg.ffprobe.log_level

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path) -> VideoMetadata:
        try:
            output = self._run(Path(path))
        except FFprobeError as e:
            logger.warning("probe degraded for %s: %s", path, e)
            if e.stderr:
                logger.debug("ffprobe stderr for %s: %s", path, e.stderr.strip())
            return EMPTY_METADATA
        return parse_probe_output(output)

    def _run(self, path: Path) -> str:
        cmd = build_ffprobe_cmd(self.ffprobe_bin, path, log_level=self.log_level)
        logger.debug("ffprobe cmd: %s", " ".join(shlex.quote(p) for p in cmd))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout_sec,
                check=False,  # we handle rc manually to attach stderr
            )
        except subprocess.TimeoutExpired as e:
            raise FFprobeError(f"ffprobe timed out after {self.timeout_sec}s", stderr=str(e)) from e
        except OSError as e:
            raise FFprobeError("Failed to execute ffprobe (OS error).", stderr=str(e)) from e

        if proc.returncode != 0:
            raise FFprobeError("ffprobe returned non-zero exit code", stderr=proc.stderr, rc=proc.returncode)
        return proc.stdout or ""


# ---- Parsing ------------------------------------------------------------------
def parse_probe_output(text: str) -> VideoMetadata:
    """
    Turn ffprobe key=value output into VideoMetadata.

    Sectioned output ([STREAM]/[FORMAT] blocks) picks the first video and the
    first audio stream by codec_type. Flat output (no sections) is read as a
    single video stream plus format fields. Each field is parsed on its own;
    a missing or malformed value leaves that field at its default.
    """
    video, audio, fmt = _split_sections(text or "")

    return VideoMetadata(
        video_codec=_parse_word(video.get("codec_name")),
        width=_parse_int(video.get("width")),
        height=_parse_int(video.get("height")),
        video_bitrate_kbps=_parse_int(video.get("bit_rate")) / 1000.0,
        audio_codec=_parse_word(audio.get("codec_name")),
        audio_bitrate_kbps=_parse_int(audio.get("bit_rate")) // 1000,
        frame_rate=_parse_rate(video.get("avg_frame_rate")),
        duration_ms=_parse_duration_ms(fmt.get("duration")),
    )


def _split_sections(text: str) -> Tuple[Dict[str, str], Dict[str, str], Dict[str, str]]:
    sections = _SECTION_RE.findall(text)
    if not sections:
        flat = _parse_pairs(text)
        return flat, {}, flat

    video: Optional[Dict[str, str]] = None
    audio: Optional[Dict[str, str]] = None
    fmt: Dict[str, str] = {}
    untyped: List[Dict[str, str]] = []
    for kind, body in sections:
        pairs = _parse_pairs(body)
        if kind == "FORMAT":
            fmt = fmt or pairs
            continue
        ctype = pairs.get("codec_type", "")
        if ctype == "video" and video is None:
            video = pairs
        elif ctype == "audio" and audio is None:
            audio = pairs
        elif not ctype:
            untyped.append(pairs)

    if video is None and untyped:
        video = untyped[0]
    return video or {}, audio or {}, fmt


def _parse_pairs(text: str) -> Dict[str, str]:
    """First occurrence of each key wins."""
    out: Dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.strip().partition("=")
        if sep and key and key not in out:
            out[key] = value.strip()
    return out


_INT_RE = re.compile(r"^\d+")
_FLOAT_RE = re.compile(r"^\d+(?:\.\d*)?")
_RATE_RE = re.compile(r"^(\d+)/(\d+)$")
_WORD_RE = re.compile(r"^\w+")


def _parse_int(x: Optional[str]) -> int:
    m = _INT_RE.match(x or "")
    return int(m.group(0)) if m else 0


def _parse_word(x: Optional[str]) -> str:
    m = _WORD_RE.match(x or "")
    return m.group(0) if m else ""


def _parse_rate(rate: Optional[str]) -> float:
    m = _RATE_RE.match(rate or "")
    if not m:
        return 0.0
    num, den = int(m.group(1)), int(m.group(2))
    return num / den if den else 0.0


def _parse_duration_ms(x: Optional[str]) -> int:
    m = _FLOAT_RE.match(x or "")
    return int(round(float(m.group(0)) * 1000)) if m else 0
