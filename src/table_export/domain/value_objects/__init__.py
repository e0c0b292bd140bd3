"""Value objects for the export engine domain.

Exports:
    Identifiers:
        - SegmentId, BlockId, SegmentOffset, TxnTimestamp
        - RowId: Composite (segment id, segment offset)
        - DEFAULT_BLOCK_CAPACITY and the virtual column id sentinels

    Logical Types:
        - LogicalTypeTag, ElementType, EmbeddingInfo, SparseInfo, DataType

    Export Configuration:
        - ColumnSelector, SelectorKind
        - CopyFileType, ExportRequest
        - SparseVector: payload of a SPARSE value
"""

from table_export.domain.value_objects.column_selector import ColumnSelector, SelectorKind
from table_export.domain.value_objects.export_request import (
    CopyFileType,
    ExportRequest,
    part_path,
)
from table_export.domain.value_objects.identifiers import (
    COLUMN_IDENTIFIER_CREATE,
    COLUMN_IDENTIFIER_DELETE,
    COLUMN_IDENTIFIER_ROW_ID,
    DEFAULT_BLOCK_CAPACITY,
    BlockId,
    RowId,
    SegmentId,
    SegmentOffset,
    TxnTimestamp,
)
from table_export.domain.value_objects.logical_types import (
    DataType,
    ElementType,
    EmbeddingInfo,
    LogicalTypeTag,
    SparseInfo,
)
from table_export.domain.value_objects.sparse_vector import SparseVector

__all__ = [
    # Identifiers
    "SegmentId",
    "BlockId",
    "SegmentOffset",
    "TxnTimestamp",
    "RowId",
    "DEFAULT_BLOCK_CAPACITY",
    "COLUMN_IDENTIFIER_ROW_ID",
    "COLUMN_IDENTIFIER_CREATE",
    "COLUMN_IDENTIFIER_DELETE",
    # Logical types
    "LogicalTypeTag",
    "ElementType",
    "EmbeddingInfo",
    "SparseInfo",
    "DataType",
    # Export configuration
    "ColumnSelector",
    "SelectorKind",
    "CopyFileType",
    "ExportRequest",
    "part_path",
    "SparseVector",
]
