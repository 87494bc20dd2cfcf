from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level_name: str = "INFO", logfile: Optional[Path | str] = None) -> int:
    """Set up root logging for an application embedding waiting intervals.

    Unknown level names fall back to INFO. When `logfile` is given a UTF-8
    FileHandler is attached, unless one for the same file already is.
    Returns the numeric level applied.
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    root_logger = logging.getLogger()

    level = getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    root_logger.setLevel(level)

    if logfile is None:
        return level

    logfile = Path(logfile)
    # Avoid adding duplicate file handlers
    for h in root_logger.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(logfile):
            return level
    fh = logging.FileHandler(str(logfile), encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(fh)
    logging.getLogger(__name__).info("Logging to %s (level %s)", logfile, logging.getLevelName(level))
    return level
