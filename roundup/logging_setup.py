"""Logging for the ``roundup`` package.

The CLI configures the package logger once at startup, from ``--verbose`` or
the ``[logging] level`` config value. Library modules only call
``get_logger`` and never attach handlers of their own, so importing roundup
as a library stays silent.
"""

import logging
import os
import sys
from typing import IO

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_PKG_LOGGER_NAME = "roundup"
_CONFIGURED = False


def parse_level(level: int | str | None) -> int:
    """Resolve a logging level.

    Args:
        level: Numeric level, or a level name in any case. If None, uses the
            ``ROUNDUP_LOG_LEVEL`` environment variable, otherwise INFO.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not a standard level.
    """
    if level is None:
        level = os.getenv("ROUNDUP_LOG_LEVEL") or "INFO"
    if isinstance(level, int):
        return level

    name = level.strip().upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LEVEL_NAMES)}")
    return getattr(logging, name)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str = DEFAULT_FORMAT,
    stream: IO[str] | None = None,
) -> None:
    """Attach a single stream handler to the package logger.

    Only the first call has any effect.

    Args:
        level: Anything ``parse_level`` accepts, e.g. ``Settings.log_level``.
        fmt: Log record format.
        stream: Output stream; defaults to the current ``sys.stderr``.

    Raises:
        ValueError: If the level name is unknown.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    numeric = parse_level(level)
    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package, silent until configured."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
