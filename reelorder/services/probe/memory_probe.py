# reelorder/services/probe/memory_probe.py
from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from reelorder.domain.entities.video_metadata import EMPTY_METADATA, VideoMetadata
from reelorder.domain.ports.probe import MediaProbePort


class InMemoryProbe(MediaProbePort):
    """
    MediaProbePort over a fixed path -> metadata table. Unknown paths behave
    like a failed probe (zero-valued metadata). Records every call.
    """

    def __init__(self, table: Optional[Mapping[str | Path, VideoMetadata]] = None):
        self._table: Dict[str, VideoMetadata] = {str(k): v for k, v in (table or {}).items()}
        self._lock = threading.Lock()
        self.calls: List[str] = []

    def add(self, path: str | Path, metadata: VideoMetadata) -> None:
        self._table[str(path)] = metadata

    def probe(self, path: Path) -> VideoMetadata:
        with self._lock:
            self.calls.append(str(path))
        return self._table.get(str(path), EMPTY_METADATA)
