"""OpenTelemetry tracing for the export engine.

Each export runs in one "table_export.export" span. Spans go to the OTLP
collector named in the observability config; tests pass their own span
exporter instead.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
)

from table_export.infrastructure.config import ObservabilityConfig

_tracer: trace.Tracer | None = None


def setup_tracing(
    config: ObservabilityConfig | None = None,
    span_exporter: SpanExporter | None = None,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    Args:
        config: Service name and OTLP endpoint (defaults to ObservabilityConfig())
        span_exporter: Extra exporter fed synchronously, e.g. an in-memory one

    Returns:
        The tracer used by trace_span()
    """
    global _tracer
    from table_export import __version__

    config = config or ObservabilityConfig()
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": config.otel_service_name,
                "service.version": __version__,
            }
        )
    )
    if config.otel_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True))
        )
    if span_exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(span_exporter))

    _tracer = provider.get_tracer(config.otel_service_name, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the configured tracer, or the global provider's one."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("table_export")
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Context manager for creating a trace span.

    An exception escaping the block is recorded on the span and marks it
    as failed before propagating.

    Args:
        name: Name of the span
        attributes: Optional attributes to add to the span

    Yields:
        The created span
    """
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span
