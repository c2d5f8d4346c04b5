# reelorder/domain/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Optional


class PlaylistError(RuntimeError):
    """Terminal failure of a playlist run; ``message`` is meant for end users."""

    kind = "playlist_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(PlaylistError):
    kind = "not_found"


class NoFilesFoundError(PlaylistError):
    kind = "no_files_found"


class EmptyInputError(PlaylistError):
    kind = "empty_input"


class WriteError(PlaylistError):
    kind = "write_error"

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
