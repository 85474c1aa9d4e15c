"""Logging setup for sheetkit entrypoints."""

import logging
import os
from typing import Optional

NOISY_LIBRARY_LOGGERS = ("googleapiclient.discovery", "urllib3")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_level(level: Optional[str] = None) -> int:
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the root logger and quiet chatty libraries."""
    logger = logging.getLogger()
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))

    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger
