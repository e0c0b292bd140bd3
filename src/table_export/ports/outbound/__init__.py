"""Outbound ports - contracts the export engine consumes.

Outbound ports define what the engine needs from storage, from the
transaction/visibility subsystem, and from output sinks.
"""

from table_export.ports.outbound.export_sink import ExportSink
from table_export.ports.outbound.storage import BlockStorage
from table_export.ports.outbound.visibility import (
    ReadTransaction,
    VisibilityFilter,
    VisibilityFilterFactory,
)

__all__ = [
    "BlockStorage",
    "ExportSink",
    "ReadTransaction",
    "VisibilityFilter",
    "VisibilityFilterFactory",
]
