"""Centralized structlog configuration for the dashboard core and CLI."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog
from structlog.types import Processor

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

LOG_FORMATS = ("console", "json")


def _renderer(log_format: str) -> Processor:
    """Return the final processor for the requested output format."""
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    level: str = "info",
    *,
    log_format: str = "console",
    stream: TextIO | None = None,
) -> None:
    """Initialize structlog and the stdlib root logger with one processor chain."""

    normalized = level.lower()
    if normalized not in LOG_LEVELS:
        valid = ", ".join(sorted(LOG_LEVELS))
        raise ValueError(f"Unsupported log level {level!r}. Choose one of: {valid}.")
    fmt = log_format.lower()
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unsupported log format {log_format!r}. Choose console or json.")
    level_value = LOG_LEVELS[normalized]

    # Logs go to stderr so command output on stdout stays machine readable.
    logging.basicConfig(level=level_value, format="%(message)s", stream=stream or sys.stderr)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_processors, _renderer(fmt)],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = ["configure_logging", "LOG_FORMATS", "LOG_LEVELS"]
