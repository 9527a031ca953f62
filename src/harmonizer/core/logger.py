"""
Logging setup for Harmonizer.

All package loggers hang below the "harmonizer" logger, which writes to
stderr so that release output on stdout can be piped.
"""

import logging
import sys
from typing import Optional, TextIO, Union
from .config import LOGGING_CONFIG

PACKAGE_LOGGER = "harmonizer"

# Libraries which log every HTTP connection at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def resolve_level(level: Union[str, int, None]) -> int:
    """Turn a level name or number into a logging level, unknown names give INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName((level or LOGGING_CONFIG["LEVEL"]).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[str, int, None] = None,
    enable_console: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Calling this again replaces the previous handler.

    Args:
        level: Level name or number, defaults to LOGGING_CONFIG["LEVEL"]
        enable_console: Attach a stream handler
        stream: Target stream, stderr when omitted

    Returns:
        The "harmonizer" logger
    """
    log_level = resolve_level(level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    package_logger.handlers.clear()

    if enable_console:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOGGING_CONFIG["FORMAT"]))
        package_logger.addHandler(handler)

    package_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return package_logger


def set_log_level(level: Union[str, int]) -> int:
    """Change the level of the package logger after setup, returns the new level."""
    log_level = resolve_level(level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        setup_logging(log_level)
    package_logger.setLevel(log_level)
    return log_level


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, given as __name__ or relative to the package."""
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        setup_logging()

    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
