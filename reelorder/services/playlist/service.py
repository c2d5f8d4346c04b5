from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from reelorder.common.concurrency.thread_manager import ThreadManager
from reelorder.common.logging import get_logger
from reelorder.common.settings import get_settings
from reelorder.domain.dataclasses.reports import PlaylistReport
from reelorder.domain.entities.scored_entry import ScoredEntry
from reelorder.domain.entities.source import PlaylistSource
from reelorder.domain.entities.video_metadata import EMPTY_METADATA, VideoMetadata
from reelorder.domain.enums import ScoringPolicy, SortStrategy
from reelorder.domain.errors import EmptyInputError, NoFilesFoundError, PlaylistError
from reelorder.domain.policies.quality_scorer import QualityScorer, get_scorer
from reelorder.domain.policies.sorter import sort_entries
from reelorder.domain.ports.files import FileOpsPort
from reelorder.domain.ports.log_sink import LogSinkPort
from reelorder.domain.ports.probe import MediaProbePort
from reelorder.services.discovery.file_discovery import discover
from reelorder.services.filesystem.local_file_ops import LocalFileOps
from reelorder.services.playlist.log_sinks import NullLogSink
from reelorder.services.playlist.xspf import serialize
from reelorder.services.probe.ffprobe_adapter import FFprobeAdapter  # default adapter

logger = get_logger(__name__)

LOG_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


class PlaylistService:
    """
    Runs the whole pipeline for one source:
    discover (or take the given list) -> probe in parallel -> score -> sort
    -> render XSPF -> write to disk.

    Per-file probe failures degrade to zero-valued metadata and never stop a
    run. A missing root, an empty file list and an unwritable destination end
    the run and are returned on the report (``report.error``).
    """

    def __init__(
        self,
        *,
        probe: Optional[MediaProbePort] = None,
        scorer: Optional[QualityScorer] = None,
        file_ops: Optional[FileOpsPort] = None,
        log_sink: Optional[LogSinkPort] = None,
        video_exts: Optional[Iterable[str]] = None,
        max_workers: Optional[int] = None,
        verbose: bool = False,
    ) -> None:
        self.cfg = get_settings()
        self.probe: MediaProbePort = probe or FFprobeAdapter()
        self.scorer: QualityScorer = scorer or get_scorer(self.cfg.scoring_policy)
        self.file_ops: FileOpsPort = file_ops or LocalFileOps()
        self.log_sink: LogSinkPort = log_sink or NullLogSink()
        self.video_exts: List[str] = list(video_exts) if video_exts is not None else list(self.cfg.video_exts)
        self.max_workers = max_workers or self.cfg.concurrency.effective_probe_workers
        self.verbose = verbose

    @classmethod
    def with_policy(cls, policy: ScoringPolicy | str, **kwargs) -> "PlaylistService":
        return cls(scorer=get_scorer(policy), **kwargs)

    # --- main ---------------------------------------------------------------

    def run(
        self,
        source: PlaylistSource,
        sort_strategy: SortStrategy | str | None = None,
        output_path: Optional[Path | str] = None,
    ) -> PlaylistReport:
        rpt = PlaylistReport()
        rpt.start()
        strategy = SortStrategy.parse(sort_strategy if sort_strategy is not None else self.cfg.default_sort)
        rpt.output_path = Path(output_path) if output_path is not None else self.cfg.output_path

        try:
            files = self._resolve_files(source, rpt)
            rpt.planned = len(files)

            entries = self._probe_and_score(files, rpt)
            rpt.entries = sort_entries(entries, strategy)
            self._log(rpt, f"Sorted {len(entries)} file(s) by {strategy.value}")

            rpt.document = serialize(rpt.entries, title=self.cfg.playlist_title)

            self.file_ops.write_text(rpt.output_path, rpt.document)
            rpt.written = True
            self._log(rpt, f"Playlist saved to: {rpt.output_path}")
        except PlaylistError as e:
            rpt.fail(e)
            self._log(rpt, f"Error: {e.message}")
        else:
            self._log(rpt, "Process completed")

        rpt.stop()
        return rpt

    # --- stages -------------------------------------------------------------

    def _resolve_files(self, source: PlaylistSource, rpt: PlaylistReport) -> List[str]:
        if source.is_manual:
            self._log(rpt, "Starting manual playlist process")
            files = list(source.paths or ())
            if not files:
                raise EmptyInputError("No files provided for manual playlist")
            self._log(rpt, f"Processing {len(files)} files")
            return files

        root = source.root_dir
        self._log(rpt, f"Starting process for directory: {root}")
        files = discover(root, self.video_exts)
        if not files:
            raise NoFilesFoundError(f"No video files found in directory: {root}")
        self._log(rpt, f"Found {len(files)} video files")
        return files

    def _probe_and_score(self, files: List[str], rpt: PlaylistReport) -> List[ScoredEntry]:
        with ThreadManager[str, VideoMetadata](
            name="probe",
            max_workers=min(self.max_workers, len(files)),
            max_queue=self.cfg.concurrency.max_queue,
        ) as pool:
            results = pool.map(self._probe_one, files)

        entries: List[ScoredEntry] = []
        for path, md in zip(files, results):
            if md.is_empty:
                rpt.degraded += 1
                rpt.add_error(path, "probe returned no metadata")
            else:
                rpt.probed_ok += 1

            size = self.file_ops.file_size(Path(path))
            score = self.scorer.score(md, size)
            entries.append(ScoredEntry(path=path, metadata=md, size_bytes=size, score=score))

            self._log(rpt, f"File processed: {path}, Quality Score: {_fmt_score(score)}")
            if self.verbose:
                self._log(
                    rpt,
                    f"  codec={md.video_codec or '-'} resolution={md.width}x{md.height} "
                    f"fps={md.frame_rate:.3f} vbitrate={md.video_bitrate_kbps:.0f}kbps "
                    f"audio={md.audio_codec or '-'}@{md.audio_bitrate_kbps}kbps "
                    f"duration={md.duration_ms}ms size={size}",
                )
        return entries

    def _probe_one(self, path: str) -> VideoMetadata:
        try:
            return self.probe.probe(Path(path))
        except Exception as e:
            # ports should not raise; a broken one still only costs this file
            logger.warning("probe raised for %s: %s", path, e)
            return EMPTY_METADATA

    # --- logging ------------------------------------------------------------

    def _log(self, rpt: PlaylistReport, message: str) -> None:
        line = f"{datetime.now().strftime(LOG_TS_FORMAT)} - {message}"
        rpt.log_lines.append(line)
        logger.info(message)
        try:
            self.log_sink.write(line)
        except Exception as e:
            logger.warning("log sink write failed: %s", e)


def _fmt_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else f"{score:.2f}"
