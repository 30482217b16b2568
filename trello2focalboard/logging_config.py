"""Logging setup shared by the CLI and library callers.

Everything logs under the ``trello2focalboard`` logger. The console gets bare
``LEVEL: message`` lines on stderr so stdout stays free; an optional log file
gets the same messages with timestamps.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "trello2focalboard"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def resolve_level(verbose: bool = False, quiet: bool = False, level: str | None = None) -> str:
    """Turn the CLI logging flags into a level name

    -v wins over -q, which wins over --log-level. No flag means INFO.
    """
    if verbose:
        return "DEBUG"
    if quiet:
        return "ERROR"
    if level:
        return level.upper()
    return "INFO"


def _level_number(name: str) -> int:
    number = logging.getLevelName(name.upper())
    # getLevelName() answers "Level X" for names it doesn't know
    return number if isinstance(number, int) else logging.INFO


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the package logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR). Unknown names mean INFO.
        log_file: Optional path; messages also go there, with timestamps.

    Example:
        >>> setup_logging("DEBUG")  # Show every mapped card
        >>> setup_logging("INFO", "import.log")  # Console + file
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_number(level))

    # Calling twice replaces the handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        # Summary lines carry emoji
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
