"""
Logging setup for savelink.

Every run appends timestamped operation messages to a plain-text log file
in the state directory. In debug mode the same records are also written to
stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "savelink"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file: Path | None = None, debug: bool = False) -> logging.Logger:
    """
    Configure the savelink logger.

    Args:
        log_file: Append-only log file (created with its parent directory)
        debug: If True, also log to stderr at DEBUG level

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Handlers from a previous run in the same process (tests, repeated CLI calls)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    if debug:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
