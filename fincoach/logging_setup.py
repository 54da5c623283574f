"""Logging for the ``fincoach`` package.

The CLI calls ``configure_logging`` once at startup. Library modules only
call ``get_logger`` and never attach handlers of their own.
"""

from __future__ import annotations

import logging
import os

_PKG_LOGGER_NAME = "fincoach"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("FINCOACH_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    """Send ``fincoach`` log records to stderr, once per process.

    ``level`` may be a number or a level name. Without one,
    ``FINCOACH_LOG_LEVEL`` is used, falling back to ``INFO``.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_FORMAT))

    logger.setLevel(numeric_level)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until an application configures it."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
