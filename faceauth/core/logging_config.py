"""Logging for the faceauth service.

All loggers live under the ``faceauth`` tree. The tree root is configured
once, from ``LOG_LEVEL`` and ``LOG_FILE``, the first time a module asks for a
logger; module loggers only propagate to it.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "faceauth"

# 2025-11-04 15:30:45 | INFO     | faceauth.services.enrollment | Enrolled face
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, stream=None):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        stream = stream or sys.stdout
        self.use_color = hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if not (self.use_color and color):
            return super().format(record)

        # Other handlers format the same record; color a copy
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname:<8}{self.RESET}"
        return super().format(colored)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure the ``faceauth`` logger tree.

    Only the first call installs handlers. Settings not passed explicitly
    come from the environment configuration, falling back to INFO on the
    console when that configuration is invalid.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: File that also receives the log, without colors

    Returns:
        The ``faceauth`` root logger.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    if level is None or log_file is None:
        from faceauth.core.config import get_config

        try:
            config = get_config()
        except ValueError:
            config = None

        if config is not None:
            level = level or config.log_level
            log_file = log_file or config.log_file

    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(sys.stdout))
    root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the ``faceauth`` tree.

    Names from outside the package (scripts run as ``__main__``) are placed
    under the tree root so they share its handlers.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Module initialized")
    """
    setup_logging()
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
