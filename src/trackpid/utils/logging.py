"""
Logging utilities.

All trackpid modules log through the "trackpid" logger; applications call
setup_logging() once to attach handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _formatter(with_name: bool) -> logging.Formatter:
    fmt = "%(asctime)s | %(levelname)-8s | "
    if with_name:
        fmt += "%(name)s | "
    return logging.Formatter(fmt + "%(message)s", datefmt=_DATEFMT)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str | Path] = None,
    name: str = "trackpid",
) -> logging.Logger:
    """
    Attach a stdout handler (and optionally a file handler) to the logger.

    Calling this again replaces previously attached handlers, so repeated
    setup in notebooks or tests does not duplicate output.

    Args:
        level: Logging level
        log_file: Optional path to log file
        name: Logger name

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(_formatter(with_name=False))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(_formatter(with_name=True))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "trackpid") -> logging.Logger:
    """Get the package logger (or a named child of it)."""
    return logging.getLogger(name)
