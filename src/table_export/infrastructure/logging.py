"""Structured logging for the export engine.

Loggers come from structlog. Every event carries the logger name, the
level and an ISO timestamp; events emitted while an export runs also
carry that export's context (schema, table, file type, target path),
bound once by the operator through export_context().
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Generator

import structlog
from structlog.types import Processor

from table_export.infrastructure.config import ObservabilityConfig


def setup_logging(config: ObservabilityConfig | None = None) -> None:
    """
    Set up structured logging with structlog.

    Args:
        config: Log level and format (defaults to ObservabilityConfig())
    """
    config = config or ObservabilityConfig()
    level = getattr(logging, config.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a bound logger, optionally with initial context."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


@contextmanager
def export_context(**context: Any) -> Generator[None, None, None]:
    """Bind context to every log event emitted inside the block."""
    with structlog.contextvars.bound_contextvars(**context):
        yield
