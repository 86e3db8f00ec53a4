"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Every module obtains its logger through ``get_logger``; the level comes
from ``H5FeedConfig.log_level`` via ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def configure_logging(level_name: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog output for the whole process.

    Args:
        level_name: Validated level name, e.g. ``INFO`` or ``ERROR``.
    """
    level = logging.getLevelName(level_name.upper())
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured JSON output.
    """
    return structlog.get_logger(name)


def _stderr_logger(*_args: Any) -> Any:
    """Create a print logger bound to the current ``sys.stderr``."""
    return structlog.PrintLogger(sys.stderr)


configure_logging()
