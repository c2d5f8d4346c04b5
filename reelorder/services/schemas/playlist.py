# services/schemas/playlist.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from reelorder.domain.enums import ScoringPolicy, SortStrategy


class PlaylistRunRequest(BaseModel):
    # Exactly one of root_dir / files
    root_dir: Optional[str] = Field(None, description="Directory to scan recursively for video files",
                                    examples=["/media/videos"])
    files: Optional[List[str]] = Field(None, description="Explicit file list (manual playlist mode)")
    sort: SortStrategy = Field(SortStrategy.none, description="none|quality|name|duration|size")
    scoring: Optional[ScoringPolicy] = Field(None, description="Defaults to the configured policy")
    output_path: Optional[str] = Field(None, description="Playlist file name, relative to the server output directory",
                                       examples=["movies/vlc_playlist.xspf"])
    verbose: bool = False

    @field_validator("sort", mode="before")
    @classmethod
    def _parse_sort(cls, v):
        return SortStrategy.parse(v)

    @model_validator(mode="after")
    def _one_source(self) -> "PlaylistRunRequest":
        if (self.root_dir is None) == (self.files is None):
            raise ValueError("provide exactly one of 'root_dir' or 'files'")
        return self


class PlaylistTrackRead(BaseModel):
    track_id: int
    path: str
    duration_ms: int
    size_bytes: int
    score: float


class PlaylistRunResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    output_path: Optional[str] = None
    written: bool = False
    degraded: int = 0
    document: Optional[str] = None
    tracks: List[PlaylistTrackRead] = Field(default_factory=list)
    log_lines: List[str] = Field(default_factory=list)
