"""Logging setup for applications built on scrapekit."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from .models.config import LOG_LEVELS

LOGGER_NAME = "scrapekit"
# Module loggers are named scrapekit.<package>.<module>
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the ``scrapekit`` logger.

    Library modules only create loggers; call this from an application (the
    CLI does) to get output.

    Args:
        level: One of the levels accepted by ``ScrapeConfig.log_level``,
            case-insensitive
        log_file: Optional file that receives the same records as stdout
        format_string: Optional custom format string for log messages
        force: If True, replace existing handlers

    Returns:
        The ``scrapekit`` logger

    Raises:
        ValueError: If level is not a known log level
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Invalid log level {level!r}, expected one of: {', '.join(LOG_LEVELS)}")
    numeric_level = logging.getLevelName(level_name)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()

        formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
        logger.addHandler(_handler(logging.StreamHandler(sys.stdout), numeric_level, formatter))
        if log_file:
            logger.addHandler(_handler(logging.FileHandler(log_file), numeric_level, formatter))

    # Records stop at the scrapekit logger
    logger.propagate = False

    return logger
