# backend/birdsurvey/logging_utils.py
"""Logging helpers.

Modules call ``get_logger(__name__)``; the root handler is installed once so
reloads in development don't stack duplicate handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def configure_root_logger(level: Union[int, str, None] = None) -> None:
    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        return

    if level is None:
        from .config import get_settings

        level = get_settings().log_level.upper()

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_root_logger()
    return logging.getLogger(name)
