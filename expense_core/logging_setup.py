"""Centralized logging configuration for the ``expense_core`` package.

``configure_logging(...)`` attaches a single ``StreamHandler`` to the package
root logger and is meant to be called once by entry points (the CLI or the
API factory). ``get_logger(name)`` is what library modules use; until the
package is configured it only ever sees a ``NullHandler``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "expense_core"
_CONFIGURED = False

LOG_LEVEL_ENV = "EXPENSE_TRACKER_LOG_LEVEL"


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the package root logger exactly once.

    ``level`` falls back to ``EXPENSE_TRACKER_LOG_LEVEL`` and then to WARNING,
    so the console stays quiet unless asked otherwise. ``stream`` defaults to
    whatever ``sys.stderr`` is at call time.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = _parse_level(level if level is not None else os.getenv(LOG_LEVEL_ENV))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
