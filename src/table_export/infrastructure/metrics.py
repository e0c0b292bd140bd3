"""Prometheus metrics for the table export engine."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)

from table_export.infrastructure.config import ObservabilityConfig


class MetricsRegistry:
    """Registry of all export metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        self.exports_total = Counter(
            "table_export_exports_total",
            "Total number of export operations",
            ["file_type", "status"],  # status: success, error
            registry=self._registry,
        )

        self.rows_total = Counter(
            "table_export_rows_total",
            "Total rows written by export operations",
            ["file_type"],
            registry=self._registry,
        )

        self.files_total = Counter(
            "table_export_files_total",
            "Total output files produced (including .part files)",
            ["file_type"],
            registry=self._registry,
        )

        self.duration_seconds = Histogram(
            "table_export_duration_seconds",
            "Export duration in seconds",
            ["file_type"],
            buckets=(0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
            registry=self._registry,
        )

        self.info = Info(
            "table_export",
            "Table export engine information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry the metrics are bound to."""
        return self._registry


_metrics: MetricsRegistry | None = None


def setup_metrics(
    config: ObservabilityConfig | None = None,
    registry: CollectorRegistry | None = None,
    serve: bool = True,
) -> MetricsRegistry:
    """
    Set up the export metrics and, optionally, the Prometheus scrape endpoint.

    Args:
        config: Metrics port (defaults to ObservabilityConfig())
        registry: Optional custom registry
        serve: Start the HTTP server on config.metrics_port

    Returns:
        The metrics registry
    """
    global _metrics
    from table_export import __version__

    config = config or ObservabilityConfig()
    _metrics = MetricsRegistry(registry)
    _metrics.info.info({"version": __version__, "service": config.otel_service_name})

    if serve:
        start_http_server(config.metrics_port, registry=_metrics.registry)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
