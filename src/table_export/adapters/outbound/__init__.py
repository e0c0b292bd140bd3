"""Outbound adapters - implementations of outbound ports.

These adapters write export files in each supported encoding and
provide an in-memory segment/block store.
"""

from table_export.adapters.outbound.csv_sink import CSVSink
from table_export.adapters.outbound.file_sink import FileSink
from table_export.adapters.outbound.fvecs_sink import FVECSSink
from table_export.adapters.outbound.jsonl_sink import JSONLSink
from table_export.adapters.outbound.memory_storage import (
    NOT_DELETED,
    InMemoryTableStorage,
    SnapshotTransaction,
)
from table_export.adapters.outbound.parquet_sink import ParquetSink

__all__ = [
    "CSVSink",
    "FileSink",
    "FVECSSink",
    "InMemoryTableStorage",
    "JSONLSink",
    "NOT_DELETED",
    "ParquetSink",
    "SnapshotTransaction",
]
