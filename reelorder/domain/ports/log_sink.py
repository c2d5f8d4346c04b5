from __future__ import annotations
from typing import Protocol

class LogSinkPort(Protocol):
    """Append-only destination for run log lines. Opened before a run, closed after."""
    def write(self, line: str) -> None: ...
    def close(self) -> None: ...
