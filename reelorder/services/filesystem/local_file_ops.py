from __future__ import annotations

import os
import tempfile
from pathlib import Path

from reelorder.domain.errors import WriteError
from reelorder.domain.ports.files import FileOpsPort


class LocalFileOps(FileOpsPort):
    """
    Local filesystem implementation for FileOpsPort.
    """

    def write_text(self, path: Path, text: str) -> None:
        """
        Write to a sibling temp file, then os.replace() it over ``path``.
        A failed write leaves the previous file (or nothing) in place.
        """
        p = Path(path)
        tmp: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", suffix=".tmp", prefix=f".{p.name}.", delete=False, dir=str(p.parent)
            ) as tf:
                tmp = Path(tf.name)
                tf.write(text)
            os.replace(tmp, p)
            tmp = None
        except OSError as e:
            raise WriteError(f"Failed to save playlist file: {p} ({e.strerror or e})", path=p) from e
        finally:
            if tmp is not None:
                tmp.unlink(missing_ok=True)

    def file_size(self, path: Path) -> int:
        """Size in bytes; 0 when the file vanished or cannot be stat'ed."""
        try:
            return Path(path).stat().st_size
        except OSError:
            return 0
