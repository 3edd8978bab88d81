# Logging setup for the recipe_scout logger tree
# Modules log through logging.getLogger(__name__); this wires handlers once at startup.

from __future__ import annotations
import logging
import logging.handlers
from typing import Optional

ROOT_LOGGER = "recipe_scout"
LOG_FORMAT = "%(asctime)s - %(name)-32s - %(levelname)-5s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_FILE_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: DEBUG / INFO / WARNING / ERROR
        log_file: optional path; adds a size-rotated file handler

    Returns:
        the configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # repeated startups (tests, reload) must not stack handlers
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=MAX_FILE_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("logging configured (level=%s, file=%s)", level, log_file or "-")
    return logger
