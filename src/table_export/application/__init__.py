"""Application layer - export orchestration.

Exports:
    - ExportOperator: binds a request to the catalog and runs the export
"""

from table_export.application.export_operator import ExportOperator

__all__ = [
    "ExportOperator",
]
