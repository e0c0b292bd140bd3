"""Unit tests for metrics and tracing setup."""

from __future__ import annotations

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import CollectorRegistry

from table_export import __version__
from table_export.infrastructure import metrics, tracing
from table_export.infrastructure.config import ObservabilityConfig


@pytest.mark.unit
class TestMetrics:
    """Tests for the metrics registry."""

    def test_setup_without_server(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(metrics, "_metrics", None)
        registry = CollectorRegistry()

        result = metrics.setup_metrics(registry=registry, serve=False)

        assert metrics.get_metrics() is result
        assert result.registry is registry
        assert registry.get_sample_value(
            "table_export_info", {"version": __version__, "service": "table_export"}
        ) == 1.0

    def test_counters_labelled(self, metrics_registry: metrics.MetricsRegistry) -> None:
        metrics_registry.exports_total.labels(file_type="csv", status="success").inc()
        metrics_registry.rows_total.labels(file_type="csv").inc(5)
        registry = metrics_registry.registry
        assert registry.get_sample_value(
            "table_export_exports_total", {"file_type": "csv", "status": "success"}
        ) == 1.0
        assert registry.get_sample_value("table_export_rows_total", {"file_type": "csv"}) == 5.0


@pytest.mark.unit
class TestTracing:
    """Tests for trace_span."""

    @pytest.fixture
    def exporter(self, monkeypatch: pytest.MonkeyPatch) -> InMemorySpanExporter:
        monkeypatch.setattr(tracing, "_tracer", None)
        exporter = InMemorySpanExporter()
        tracing.setup_tracing(ObservabilityConfig(otel_service_name="test"), span_exporter=exporter)
        return exporter

    def test_span_attributes(self, exporter: InMemorySpanExporter) -> None:
        with tracing.trace_span("work", {"table": "t"}) as span:
            span.set_attribute("rows", 3)
        (finished,) = exporter.get_finished_spans()
        assert finished.name == "work"
        assert dict(finished.attributes) == {"table": "t", "rows": 3}

    def test_exception_recorded(self, exporter: InMemorySpanExporter) -> None:
        with pytest.raises(ValueError):
            with tracing.trace_span("failing"):
                raise ValueError("boom")
        (finished,) = exporter.get_finished_spans()
        assert not finished.status.is_ok
        assert finished.events[0].name == "exception"
