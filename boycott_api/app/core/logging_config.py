"""
Logging configuration for the catalog service.

``setup_logging`` configures the root logger once per process from
``settings``: ``LOG_LEVEL`` picks the level and, when ``LOG_FILE`` is
set, records are also written to a size-rotated file
(``LOG_MAX_BYTES`` / ``LOG_BACKUP_COUNT``).  Explicit arguments
override the settings, which the maintenance script uses.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger unless it already has handlers.

    Parameters
    ----------
    level : Optional[str]
        Logging level name, case insensitive.  Defaults to
        ``settings.log_level``; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File to log to in addition to the console.  Defaults to
        ``settings.log_file``; empty means console only.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured (tests, repeated ``create_app`` calls or
        # uvicorn installing its own handlers first).
        return

    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logger.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logfile = logfile or settings.log_file
    if logfile:
        file_handler = RotatingFileHandler(
            Path(logfile).resolve(),
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Per-request access lines duplicate what the catalog services log
    # for every mutation; keep them only when debugging.
    if numeric_level > logging.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
