# reelorder/services/api/routers/playlists.py
from __future__ import annotations

from http import HTTPStatus
from pathlib import Path
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from reelorder.common.logging import get_logger
from reelorder.common.settings import Settings, get_settings
from reelorder.domain.entities.source import PlaylistSource
from reelorder.domain.errors import EmptyInputError, NoFilesFoundError, NotFoundError, WriteError
from reelorder.domain.policies.quality_scorer import get_scorer
from reelorder.domain.ports.probe import MediaProbePort
from reelorder.services.api.deps import get_media_probe
from reelorder.services.mappers.playlist import to_run_response_from_report
from reelorder.services.playlist.log_sinks import FileLogSink
from reelorder.services.playlist.service import PlaylistService
from reelorder.services.schemas.playlist import PlaylistRunRequest, PlaylistRunResponse

logger = get_logger(__name__)

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/playlists", tags=["playlists"])

_STATUS_BY_ERROR: Dict[type, int] = {
    NotFoundError: HTTPStatus.NOT_FOUND,
    NoFilesFoundError: HTTPStatus.UNPROCESSABLE_ENTITY,
    EmptyInputError: HTTPStatus.UNPROCESSABLE_ENTITY,
    WriteError: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def resolve_output_path(settings: Settings, requested: Optional[str]) -> Path:
    """
    Playlists requested over HTTP always land under settings.output_dir.
    Absolute paths and paths that climb out of it (.. or symlinks) are rejected.
    """
    base = Path(settings.output_dir).resolve()
    if requested is None:
        return base / settings.output_path

    rel = Path(requested)
    target = (base / rel).resolve()
    if rel.is_absolute() or not target.is_relative_to(base):
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail="output_path must be a relative path inside the output directory",
        )
    return target


def _open_run_log(settings: Settings) -> Optional[FileLogSink]:
    if not settings.log_dir:
        return None
    try:
        return FileLogSink.timestamped(settings.log_dir)
    except OSError as e:
        logger.warning("cannot open run log in %s, continuing without it: %s", settings.log_dir, e)
        return None


@router.post("", response_model=PlaylistRunResponse)
def create_playlist(
    payload: PlaylistRunRequest,
    response: Response,
    probe: MediaProbePort = Depends(get_media_probe),
) -> PlaylistRunResponse:
    settings = get_settings()
    output_path = resolve_output_path(settings, payload.output_path)
    source = (
        PlaylistSource.from_directory(payload.root_dir)
        if payload.root_dir is not None
        else PlaylistSource.from_paths(payload.files or [])
    )

    sink = _open_run_log(settings)
    try:
        svc = PlaylistService(
            probe=probe,
            scorer=get_scorer(payload.scoring or settings.scoring_policy),
            log_sink=sink,
            verbose=payload.verbose,
        )
        rpt = svc.run(source, payload.sort, output_path)
    finally:
        if sink is not None:
            sink.close()

    if rpt.error is not None:
        response.status_code = _STATUS_BY_ERROR.get(type(rpt.error), HTTPStatus.INTERNAL_SERVER_ERROR)
    return to_run_response_from_report(report=rpt)
