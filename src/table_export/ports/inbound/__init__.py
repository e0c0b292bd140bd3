"""Inbound ports - API contracts of the export engine."""

from table_export.ports.inbound.table_exporter import ExportResult, TableExporter

__all__ = [
    "ExportResult",
    "TableExporter",
]
