"""Infrastructure layer - cross-cutting concerns."""

from table_export.infrastructure.config import Config, get_config
from table_export.infrastructure.logging import export_context, get_logger, setup_logging
from table_export.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from table_export.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "export_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
