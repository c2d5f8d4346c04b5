# reelorder/common/logging.py
from __future__ import annotations

import logging
from typing import Optional


def get_logger(name: str = "reelorder", level: Optional[int] = None) -> logging.Logger:
    """
    Return a named logger.
    If no handlers are set anywhere, we add a basicConfig once. Module loggers
    ("reelorder.*") leave their level unset and follow the "reelorder" logger.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=level or logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if level is not None:
        logger.setLevel(level)
    return logger


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    lvl = logging.getLevelName((name or "").upper())
    return lvl if isinstance(lvl, int) else default
