from __future__ import annotations
from pathlib import Path
from typing import Protocol

class FileOpsPort(Protocol):
    def write_text(self, path: Path, text: str) -> None: ...
    def file_size(self, path: Path) -> int: ...
