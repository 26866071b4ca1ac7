"""Structured logging configuration.

Components log events with key/value context rather than formatted
sentences, e.g. ``logger.info("rows_deleted", table="users", count=2)``.
Hosts call setup_logging() once; until then structlog's defaults apply.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog
from structlog.types import Processor

from tabledb.infrastructure.config import ObservabilityConfig, get_config


def setup_logging(
    config: ObservabilityConfig | None = None,
    stream: IO[str] | None = None,
) -> None:
    """
    Set up structured logging with structlog.

    Args:
        config: Log level and format. Defaults to the global configuration.
        stream: Where rendered events go (default: stdout).
    """
    config = config or get_config().observability
    level = getattr(logging, config.log_level)
    stream = stream or sys.stdout

    # Configure standard library logging
    logging.basicConfig(format="%(message)s", stream=stream, level=level)

    # Build processor chain
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: Processor
    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    # Route events to the chosen stream
    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind, e.g. database="shop"

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
