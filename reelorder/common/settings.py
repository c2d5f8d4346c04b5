# reelorder/common/settings.py
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from reelorder.common.strings.splitters import normalize_exts
from reelorder.domain.enums import DEFAULT_VIDEO_EXTS, ScoringPolicy, SortStrategy


class APIConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    prefix: str = "/api"


class ConcurrencyConfig(BaseModel):
    # None -> sized to available parallelism
    probe_workers: Optional[int] = Field(default=None, ge=1, le=256)
    # Max outstanding probe tasks; 0 = unbounded
    max_queue: int = Field(default=64, ge=0)

    @computed_field  # type: ignore[misc]
    @property
    def effective_probe_workers(self) -> int:
        if self.probe_workers:
            return self.probe_workers
        return max(1, os.cpu_count() or 4)


class FFProbeConfig(BaseModel):
    timeout_sec: int = Field(default=30, ge=1)
    log_level: str = "error"  # quiet|panic|fatal|error|warning|info|verbose|debug|trace
    bin: str = "ffprobe"  # env: FFPROBE__BIN


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "reelorder"
    app_env: str = "development"  # development|test|production
    log_level: str = "INFO"

    # -------- Discovery --------
    video_exts: List[str] = Field(default_factory=lambda: list(DEFAULT_VIDEO_EXTS))

    # -------- Pipeline defaults --------
    scoring_policy: ScoringPolicy = ScoringPolicy.additive
    default_sort: SortStrategy = SortStrategy.none
    output_path: Path = Path("vlc_playlist.xspf")
    # HTTP requests may only write playlists under this directory
    output_dir: Path = Path(".")
    playlist_title: str = "Playlist"

    # Directory for per-run timestamped log files; unset disables them
    log_dir: Optional[Path] = None

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    concurrency: ConcurrencyConfig = ConcurrencyConfig()
    ffprobe: FFProbeConfig = FFProbeConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("video_exts", mode="after")
    @classmethod
    def _normalize_exts(cls, v: List[str]) -> List[str]:
        return normalize_exts(v)

    @field_validator("default_sort", mode="before")
    @classmethod
    def _parse_sort(cls, v):
        return SortStrategy.parse(v)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from reelorder.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
