"""Block-sized columnar buffer produced by column materialization."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from table_export.domain.entities.value import Value
from table_export.domain.value_objects import (
    DataType,
    LogicalTypeTag,
    RowId,
    SegmentId,
    SegmentOffset,
)


class ColumnVector:
    """Read-only values of one column for one block.

    The backing sequence may be a list or a numpy array; for vector types
    a 2-D array holds one embedding per row.
    """

    __slots__ = ("_data_type", "_data")

    def __init__(self, data_type: DataType, data: Sequence[Any] | np.ndarray) -> None:
        self._data_type = data_type
        self._data = data

    @classmethod
    def row_ids(
        cls, segment_id: SegmentId, start_offset: int, count: int
    ) -> ColumnVector:
        """Dense run of row ids starting at start_offset inside the segment."""
        data = [
            RowId(segment_id, SegmentOffset(start_offset + i)) for i in range(count)
        ]
        return cls(DataType(LogicalTypeTag.ROW_ID), data)

    @property
    def data_type(self) -> DataType:
        return self._data_type

    def __len__(self) -> int:
        return len(self._data)

    @property
    def size(self) -> int:
        return len(self._data)

    def get_value(self, index: int) -> Value:
        payload = self._data[index]
        if isinstance(payload, np.generic):
            payload = payload.item()
        return Value(self._data_type, payload)

    def __repr__(self) -> str:
        return f"ColumnVector({self._data_type}, size={len(self)})"
