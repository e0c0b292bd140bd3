"""Adapters layer - concrete implementations of port interfaces.

Outbound adapters provide the output sinks (one per encoding) and an
in-memory storage backend.
"""

from table_export.adapters.outbound import (
    CSVSink,
    FileSink,
    FVECSSink,
    InMemoryTableStorage,
    JSONLSink,
    ParquetSink,
    SnapshotTransaction,
)

__all__ = [
    # Outbound adapters
    "CSVSink",
    "FileSink",
    "FVECSSink",
    "InMemoryTableStorage",
    "JSONLSink",
    "ParquetSink",
    "SnapshotTransaction",
]
