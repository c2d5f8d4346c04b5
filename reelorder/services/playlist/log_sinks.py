# reelorder/services/playlist/log_sinks.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from reelorder.domain.ports.log_sink import LogSinkPort

LOG_FILE_SUFFIX = "_reelorder.log"


class NullLogSink(LogSinkPort):
    def write(self, line: str) -> None:
        pass

    def close(self) -> None:
        pass


class MemoryLogSink(LogSinkPort):
    def __init__(self) -> None:
        self.lines: List[str] = []
        self.closed = False

    def write(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        self.closed = True


class FileLogSink(LogSinkPort):
    """
    Appends one line per write and flushes, so the file is readable while a
    run is in progress. Open on construction; close() (or the with-block)
    ends its life.
    """

    def __init__(self, path: Path | str, *, append: bool = True) -> None:
        self.path = Path(path)
        self._fh: Optional[TextIO] = self.path.open("a" if append else "w", encoding="utf-8")

    @classmethod
    def timestamped(cls, log_dir: Path | str, now: Optional[datetime] = None) -> "FileLogSink":
        """New file named <YYYYmmdd_HHMMSS>_reelorder.log inside ``log_dir``."""
        stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        d = Path(log_dir)
        d.mkdir(parents=True, exist_ok=True)
        return cls(d / f"{stamp}{LOG_FILE_SUFFIX}")

    def write(self, line: str) -> None:
        if self._fh is None:
            raise ValueError(f"log sink {self.path} is closed")
        self._fh.write(line + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "FileLogSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
