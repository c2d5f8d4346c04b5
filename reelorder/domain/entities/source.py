# reelorder/domain/entities/source.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class PlaylistSource:
    """
    Where a run gets its files from: a root directory to scan, or an explicit
    list of files (manual mode). Exactly one of the two is set.
    """
    root_dir: Optional[Path] = None
    paths: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if (self.root_dir is None) == (self.paths is None):
            raise ValueError("PlaylistSource needs exactly one of root_dir or paths")

    @classmethod
    def from_directory(cls, root_dir: Path | str) -> "PlaylistSource":
        return cls(root_dir=Path(root_dir).expanduser())

    @classmethod
    def from_paths(cls, paths: Iterable[Path | str]) -> "PlaylistSource":
        # absolute, not resolved: symlinks keep the name the user gave them
        absolute = (str(Path(p).expanduser().absolute()) for p in paths)
        return cls(paths=tuple(dict.fromkeys(absolute)))

    @property
    def is_manual(self) -> bool:
        return self.paths is not None
