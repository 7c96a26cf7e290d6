"""
Logging helpers for maze_race.

Library modules only ask for a logger; the entry points (``main`` and ``app``)
call :func:`configure_logging` once to attach a handler.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

from maze_race.config import DEFAULT_LOG_LEVEL, LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL_ENV

ROOT_LOGGER_NAME = "maze_race"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the ``maze_race`` namespace.

    Args:
        name: Module name (typically ``__name__``). Names outside the package
            are nested under ``maze_race``.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _resolve_level(level: Union[str, int, None]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(level: Union[str, int, None] = None, stream=None) -> logging.Logger:
    """
    Install a single stream handler on the package logger.

    Calling it again replaces the previous handler, so entry points can be
    re-run (tests, reloads) without duplicating output.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_resolve_level(level))

    for handler in list(logger.handlers):
        if getattr(handler, "_maze_race_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler._maze_race_handler = True
    logger.addHandler(handler)
    logger.propagate = False
    return logger
