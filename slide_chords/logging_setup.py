from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def level_from_env() -> int | None:
    # SLIDE_CHORDS_LOG_LEVEL takes a name ("warning") or a number ("30")
    raw = os.getenv("SLIDE_CHORDS_LOG_LEVEL", "").strip()
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else None


def setup_logging(debug: bool) -> None:
    """Logs go to stderr; stdout carries exported text."""
    level = level_from_env()
    if level is None:
        level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
