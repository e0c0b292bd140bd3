"""Domain entities for the export engine.

Exports:
    Catalog:
        - ColumnDef: Name and logical type of one column
        - TableDef: Ordered column definitions of a table

    Snapshot:
        - BlockEntry: Reference to one storage block
        - SegmentSnapshot: Blocks and visibility handle of one segment
        - TableSnapshot: All segments visible to an export

    Column Data:
        - Value: One typed cell with text/JSON rendering
        - ColumnVector: One column of one block
"""

from table_export.domain.entities.column_def import ColumnDef, TableDef
from table_export.domain.entities.column_vector import ColumnVector
from table_export.domain.entities.snapshot import BlockEntry, SegmentSnapshot, TableSnapshot
from table_export.domain.entities.value import Value, format_float

__all__ = [
    # Catalog
    "ColumnDef",
    "TableDef",
    # Snapshot
    "BlockEntry",
    "SegmentSnapshot",
    "TableSnapshot",
    # Column data
    "Value",
    "ColumnVector",
    "format_float",
]
