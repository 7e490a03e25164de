"""Diagnostic logging for ledgerdesk.

User-facing output goes through rich in the command modules. Logging only
carries diagnostics and is silent unless the CLI configures it.
"""

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "ledgerdesk"
LOG_LEVEL_ENV = "LEDGERDESK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def parse_level(value: int | str | None, fallback: int = logging.WARNING) -> int:
    """Turn a level name or number into a logging level.

    Args:
        value: Level such as "DEBUG", "20" or 20.
        fallback: Level used when the value is missing or unknown.

    Returns:
        Numeric logging level.
    """
    if isinstance(value, int):
        return value
    if not value:
        return fallback

    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else fallback


def configure_logging(
    level: int | str | None = None,
    default: int | str = logging.WARNING,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a stderr handler to the package logger, once per process.

    Args:
        level: Explicit level (e.g. from --verbose). Wins over everything else.
        default: Level from the config file, used when neither an explicit
            level nor LEDGERDESK_LOG_LEVEL is set.
        stream: Handler output stream.
    """
    global _configured
    if _configured:
        return

    resolved = parse_level(level or os.environ.get(LOG_LEVEL_ENV), parse_level(default))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a ledgerdesk module; silent until configure_logging runs."""
    package = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not package.handlers:
        package.addHandler(logging.NullHandler())
    return logging.getLogger(name)
