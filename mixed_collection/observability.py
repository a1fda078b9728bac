"""Structured logging setup for applications embedding the library.

The library itself only calls ``structlog.get_logger()``; applications decide
how events are rendered by calling ``configure_logging()`` once at startup.
"""

import logging
from typing import Optional

import structlog

from mixed_collection.config import get_settings


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(debug: Optional[bool] = None, log_level: Optional[str] = None) -> None:
    """Configure structlog with console output in debug mode, JSON otherwise.

    Args:
        debug: Render human-friendly console output. Defaults to settings.DEBUG
        log_level: Minimum level name ("debug", "info", ...). Defaults to settings.LOG_LEVEL
    """
    settings = get_settings()
    if debug is None:
        debug = settings.DEBUG
    if log_level is None:
        log_level = settings.LOG_LEVEL

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_from_name(log_level)),
        cache_logger_on_first_use=False,
    )
