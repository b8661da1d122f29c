"""Structured logging configuration.

This module initializes structlog with a stable JSON line format.
Events go to stderr so command output on stdout stays parseable.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Applies the default configuration when structlog has not been
    configured yet; an explicit configure_logging call takes precedence.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not structlog.is_configured():
        configure_logging(DEFAULT_LOG_LEVEL)
    return structlog.get_logger(name)


def configure_logging(level_name: str) -> None:
    """Configure structlog processors and level filtering.

    Loggers are not cached, so a later call also changes the level of
    module loggers created at import time.

    Args:
        level_name: Minimum logging level name, e.g. "INFO".
    """
    level = logging.getLevelName(level_name.upper())
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams are honored.
    return structlog.PrintLogger(sys.stderr)
