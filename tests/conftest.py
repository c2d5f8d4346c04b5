# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from reelorder.common import settings as settings_mod

_ENV_VARS = [
    "APP_ENV",
    "LOG_LEVEL",
    "VIDEO_EXTS",
    "SCORING_POLICY",
    "DEFAULT_SORT",
    "OUTPUT_PATH",
    "OUTPUT_DIR",
    "PLAYLIST_TITLE",
    "LOG_DIR",
    "FFPROBE__BIN",
    "FFPROBE__TIMEOUT_SEC",
    "CONCURRENCY__PROBE_WORKERS",
]


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch, tmp_path):
    """Every test starts from default settings, away from any .env in the cwd."""
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()


@pytest.fixture()
def touch() -> Callable[..., Path]:
    def _touch(p: Path, size: int = 5) -> Path:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"x" * size)
        return p

    return _touch
