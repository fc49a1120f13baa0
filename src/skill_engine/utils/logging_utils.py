"""Logging utilities for Skill Engine.

The library logs through ``logging.getLogger(__name__)`` in each module and
never configures the root logger. Applications embedding an agent may call
``configure_logging`` once to get readable output from the ``skill_engine``
hierarchy.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
PACKAGE_LOGGER = "skill_engine"

_HANDLER_MARKER = "_skill_engine_handler"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """Attach a single stream handler to the ``skill_engine`` logger.

    Calling this more than once updates the level and format of the existing
    handler instead of stacking new ones.

    Args:
        level: Logging level name or number.
        fmt: Optional format string; defaults to ``DEFAULT_FORMAT``.

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if getattr(h, _HANDLER_MARKER, False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    return logger


__all__ = ["configure_logging", "DEFAULT_FORMAT", "PACKAGE_LOGGER"]
