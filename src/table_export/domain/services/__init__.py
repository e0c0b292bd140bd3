"""Domain services for the export engine.

Exports:
    - lower_type / lower_field / lower_schema / make_builder / ColumnBuilder:
      logical type lowering to Arrow
    - ColumnMaterializer: block column vectors, including virtual columns
    - ScanDriver / ScanSignal / ScanStats: visibility-aware scan loop
"""

from table_export.domain.services.column_materializer import ColumnMaterializer
from table_export.domain.services.scan_driver import ScanDriver, ScanSignal, ScanStats
from table_export.domain.services.type_lowering import (
    ColumnBuilder,
    lower_field,
    lower_schema,
    lower_type,
    make_builder,
)

__all__ = [
    "ColumnBuilder",
    "ColumnMaterializer",
    "ScanDriver",
    "ScanSignal",
    "ScanStats",
    "lower_field",
    "lower_schema",
    "lower_type",
    "make_builder",
]
