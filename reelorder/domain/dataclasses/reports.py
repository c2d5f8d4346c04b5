# reelorder/domain/dataclasses/reports.py
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from reelorder.domain.entities.scored_entry import ScoredEntry
from reelorder.domain.errors import PlaylistError


# ---------------------------------------------------------------------------
# Base report (shared fields + utilities)
# ---------------------------------------------------------------------------
@dataclass
class BaseReport:
    """Common report base:
    - timing: started_at / finished_at
    - error capture: error_details
    - helpers: start(), stop(), add_error(), as_dict()
    """
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    # Each tuple is (subject/path, message)
    error_details: List[Tuple[str, str]] = field(default_factory=list)

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = datetime.now()

    def stop(self) -> None:
        self.finished_at = datetime.now()

    def add_error(self, subject: str, message: str) -> None:
        self.error_details.append((subject, message))

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Playlist run report
# ---------------------------------------------------------------------------
@dataclass
class PlaylistReport(BaseReport):
    """
    Outcome of one PlaylistService.run(). ``error`` is the terminal failure,
    if any; on a WriteError ``document`` still holds the rendered text.
    Probe degradations are not errors: they are counted in ``degraded`` and
    listed in ``error_details``.
    """
    planned: int = 0           # files handed to the probe stage
    probed_ok: int = 0
    degraded: int = 0          # probe failed, zero-valued metadata used
    written: bool = False
    output_path: Optional[Path] = None
    document: Optional[str] = None
    entries: List[ScoredEntry] = field(default_factory=list)
    log_lines: List[str] = field(default_factory=list)
    error: Optional[PlaylistError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None

    @property
    def paths(self) -> List[str]:
        return [e.path for e in self.entries]

    def fail(self, err: PlaylistError) -> None:
        self.error = err

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error
