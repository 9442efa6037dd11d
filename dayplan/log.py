"""Rotating file logger for the dayplan package."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from dayplan.workspace import log_path

_LOGGER_NAME = "dayplan"
_MAX_BYTES = 1024 * 1024  # 1 MiB
_BACKUP_COUNT = 3


def setup_logging(root: Path | None = None, level: str = "INFO") -> logging.Logger:
    """Attach a rotating file handler to the ``dayplan`` logger.

    Safe to call more than once; a second call only updates the level.
    DAYPLAN_LOG_LEVEL overrides *level*.
    """
    level = os.environ.get("DAYPLAN_LOG_LEVEL", level).upper()
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False

    if any(getattr(h, "_dayplan", False) for h in logger.handlers):
        return logger

    path = log_path(root)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        # read-only workspace: keep the logger quiet rather than spill onto the TUI
        handler = logging.NullHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    handler._dayplan = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


def teardown_logging() -> None:
    """Detach and close handlers installed by setup_logging()."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_dayplan", False):
            logger.removeHandler(handler)
            handler.close()
