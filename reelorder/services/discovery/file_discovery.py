# reelorder/services/discovery/file_discovery.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

from reelorder.common.settings import get_settings
from reelorder.common.logging import get_logger
from reelorder.domain.errors import NotFoundError

logger = get_logger(__name__)


def discover(root_dir: Path | str, exts: Optional[Iterable[str]] = None) -> List[str]:
    """
    Walk the whole tree under ``root_dir`` and return absolute paths of regular
    files whose extension is in ``exts`` (defaults to settings.video_exts).
    Order is whatever the walk yields; an empty result is not an error here.
    """
    root = Path(root_dir).expanduser()
    if not root.is_dir():
        raise NotFoundError(f"Directory does not exist: {root}")

    wanted = {e.lower().lstrip(".") for e in (exts if exts is not None else get_settings().video_exts)}
    root = root.absolute()

    def _onerror(err: OSError) -> None:
        # unreadable subdirectory: skip it, keep walking
        logger.warning("skipping %s: %s", err.filename, err.strerror)

    found: List[str] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_onerror):
        for fname in filenames:
            full = os.path.join(dirpath, fname)
            if Path(fname).suffix.lower().lstrip(".") in wanted and os.path.isfile(full):
                found.append(full)
    logger.debug("discovered %d file(s) under %s", len(found), root)
    return found
