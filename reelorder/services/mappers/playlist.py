# reelorder/services/mappers/playlist.py
from __future__ import annotations

from typing import List, Optional

from reelorder.domain.dataclasses.reports import PlaylistReport
from reelorder.services.schemas.playlist import PlaylistRunResponse, PlaylistTrackRead


def to_track_reads(report: PlaylistReport) -> List[PlaylistTrackRead]:
    """Ordered entries -> track rows; track_id matches the vlc:id in the document."""
    return [
        PlaylistTrackRead(
            track_id=i,
            path=e.path,
            duration_ms=e.duration_ms,
            size_bytes=e.size_bytes,
            score=float(e.score),
        )
        for i, e in enumerate(report.entries)
    ]


def to_run_response_from_report(*, report: PlaylistReport) -> PlaylistRunResponse:
    out: Optional[str] = str(report.output_path) if report.output_path is not None else None
    return PlaylistRunResponse(
        ok=report.ok,
        error=report.error_message,
        error_kind=report.error.kind if report.error is not None else None,
        started_at=report.started_at,
        finished_at=report.finished_at,
        output_path=out,
        written=report.written,
        degraded=report.degraded,
        document=report.document,
        tracks=to_track_reads(report),
        log_lines=report.log_lines,
    )
