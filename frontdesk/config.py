"""Runtime configuration defaults for the backend channel and logging."""

from __future__ import annotations

import logging
import os
from pathlib import Path

_SERVER_URL_ENV = "FRONTDESK_SERVER_URL"
_DEBUG_LOG_ENV = "FRONTDESK_DEBUG_LOG"
_LOG_LEVEL_ENV = "FRONTDESK_LOG_LEVEL"

SERVER_URL = os.environ.get(_SERVER_URL_ENV, "").strip() or "http://localhost:4000"
DEBUG_LOG_PATH = os.environ.get(_DEBUG_LOG_ENV, "").strip() or "/tmp/frontdesk-debug.log"
LOG_LEVEL = os.environ.get(_LOG_LEVEL_ENV, "").strip().upper() or "DEBUG"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(path: str | None = None, level: str | None = None) -> None:
    """
    Route package logs to the debug log file.

    The terminal UI owns stdout, so nothing is written to the console.
    Calling this more than once replaces the previous handler.
    """
    log_path = Path(path or DEBUG_LOG_PATH)
    logger = logging.getLogger("frontdesk")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()

    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level or LOG_LEVEL, logging.DEBUG))
    logger.propagate = False


_REQUEST_TIMEOUT_ENV = "FRONTDESK_REQUEST_TIMEOUT"

try:
    REQUEST_TIMEOUT = float(os.environ.get(_REQUEST_TIMEOUT_ENV, "") or 10.0)
except ValueError:
    REQUEST_TIMEOUT = 10.0
