# reelorder/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from reelorder.common.logging import get_logger
from reelorder.common.strings.splitters import normalize_exts
from reelorder.domain.entities.source import PlaylistSource
from reelorder.domain.enums import CLI_VIDEO_EXTS, ScoringPolicy, SortStrategy
from reelorder.domain.policies.quality_scorer import get_scorer
from reelorder.services.playlist.log_sinks import FileLogSink
from reelorder.services.playlist.service import PlaylistService

# The command-line tool ranked by pixel rate x bitrate and only scanned MP4s.
CLI_DEFAULT_SCORING = ScoringPolicy.multiplicative


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="reelorder",
        description=(
            "Scan a directory for video files, rank them and write a VLC (XSPF) playlist. "
            "By default files are listed by path; use -q or --sort to reorder."
        ),
    )
    ap.add_argument("root_dir", nargs="?", help="Directory to scan recursively.")
    ap.add_argument(
        "--files",
        nargs="+",
        metavar="FILE",
        help="Build the playlist from these files instead of scanning a directory.",
    )
    ap.add_argument(
        "-s",
        "--sort",
        default=None,
        help="Ordering: none, quality, name, duration, size (default: none).",
    )
    ap.add_argument(
        "-q",
        "--quality",
        action="store_true",
        help="Shortcut for --sort quality (highest first).",
    )
    ap.add_argument(
        "--scoring",
        choices=[p.value for p in ScoringPolicy],
        default=CLI_DEFAULT_SCORING.value,
        help="Quality score formula (default: %(default)s).",
    )
    ap.add_argument(
        "--ext",
        default=",".join(CLI_VIDEO_EXTS),
        help="Comma-separated video extensions to scan for (default: %(default)s).",
    )
    ap.add_argument("-o", "--output", default=None, help="Playlist output path (default: vlc_playlist.xspf).")
    ap.add_argument("-l", "--log-file", default=None, help="Also append the run log to this file.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Show per-file processing details.")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if (args.root_dir is None) == (args.files is None):
        ap.error("give either a directory or --files, not both")

    logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(levelname)s: %(message)s")
    log = get_logger("reelorder", logging.INFO if args.verbose else logging.WARNING)

    try:
        strategy = SortStrategy.quality if args.quality else SortStrategy.parse(args.sort)
    except ValueError as e:
        ap.error(str(e))
    exts: List[str] = normalize_exts(args.ext)
    if not exts:
        ap.error("--ext needs at least one extension")

    source = (
        PlaylistSource.from_paths(args.files)
        if args.files is not None
        else PlaylistSource.from_directory(args.root_dir)
    )

    sink: Optional[FileLogSink] = None
    if args.log_file:
        try:
            sink = FileLogSink(args.log_file)
        except OSError as e:
            log.warning("cannot open log file %s, continuing without it: %s", args.log_file, e)
    try:
        svc = PlaylistService(
            scorer=get_scorer(args.scoring),
            log_sink=sink,
            video_exts=exts,
            verbose=args.verbose,
        )
        rpt = svc.run(source, strategy, args.output)
    finally:
        if sink is not None:
            sink.close()

    if rpt.error is not None:
        print(f"Error: {rpt.error.message}", file=sys.stderr)
        return 1

    for path in rpt.paths:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
