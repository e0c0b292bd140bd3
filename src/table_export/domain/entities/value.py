"""A single cell of a column vector and its textual renderings.

Value knows how to render itself as CSV text and as a JSON attribute.
Appending to a Parquet column is handled by the type lowering builders,
which consume the same payloads.

Payload representation by logical type:
    BOOLEAN                 bool
    TINYINT..BIGINT         int
    FLOAT16/BFLOAT16/FLOAT  float (rounded through float32 on output)
    DOUBLE                  float
    DATE / TIME             datetime.date / datetime.time
    DATETIME / TIMESTAMP    datetime.datetime
    VARCHAR                 str
    ROW_ID                  RowId
    EMBEDDING               1-D ndarray of the element dtype
    MULTIVECTOR / TENSOR    2-D ndarray, or a sequence of 1-D ndarrays
    TENSOR_ARRAY            sequence of tensors
    SPARSE                  SparseVector
"""

from __future__ import annotations

from typing import Any

import numpy as np

from table_export.domain.errors import UnsupportedLogicalTypeError
from table_export.domain.value_objects import (
    DataType,
    ElementType,
    LogicalTypeTag,
    RowId,
    SparseVector,
)

_INTEGER_TAGS = frozenset(
    {
        LogicalTypeTag.TINYINT,
        LogicalTypeTag.SMALLINT,
        LogicalTypeTag.INTEGER,
        LogicalTypeTag.BIGINT,
    }
)
_FLOAT32_TAGS = frozenset(
    {LogicalTypeTag.FLOAT16, LogicalTypeTag.BFLOAT16, LogicalTypeTag.FLOAT}
)
_DATETIME_TAGS = frozenset({LogicalTypeTag.DATETIME, LogicalTypeTag.TIMESTAMP})


def format_float(value: np.floating) -> str:
    """Shortest round-trip decimal for the value's own precision."""
    return np.format_float_positional(value, trim="0")


def _element_text(element: Any, element_type: ElementType) -> str:
    if element_type is ElementType.BIT:
        return "1" if element else "0"
    if element_type.is_floating():
        return format_float(element)
    return str(int(element))


def _element_json(element: Any, element_type: ElementType) -> Any:
    if element_type is ElementType.BIT:
        return bool(element)
    if element_type is ElementType.DOUBLE:
        return float(element)
    if element_type.is_floating():
        return float(format_float(element))
    return int(element)


def _vector_text(payload: Any, element_type: ElementType, depth: int) -> str:
    if depth == 0:
        items = (_element_text(e, element_type) for e in np.asarray(payload))
    else:
        items = (_vector_text(p, element_type, depth - 1) for p in payload)
    return "[" + ",".join(items) + "]"


def _vector_json(payload: Any, element_type: ElementType, depth: int) -> list[Any]:
    if depth == 0:
        return [_element_json(e, element_type) for e in np.asarray(payload)]
    return [_vector_json(p, element_type, depth - 1) for p in payload]


class Value:
    """One row of a column vector, tagged with its logical type."""

    __slots__ = ("_data_type", "_payload")

    def __init__(self, data_type: DataType, payload: Any) -> None:
        self._data_type = data_type
        self._payload = payload

    @property
    def data_type(self) -> DataType:
        return self._data_type

    @property
    def payload(self) -> Any:
        return self._payload

    def __repr__(self) -> str:
        return f"Value({self._data_type}, {self.to_string()})"

    def to_string(self) -> str:
        """Canonical text form, as written to CSV."""
        tag = self._data_type.tag
        payload = self._payload

        if tag is LogicalTypeTag.BOOLEAN:
            return "true" if payload else "false"
        if tag in _INTEGER_TAGS:
            return str(int(payload))
        if tag in _FLOAT32_TAGS:
            return format_float(np.float32(payload))
        if tag is LogicalTypeTag.DOUBLE:
            return format_float(np.float64(payload))
        if tag is LogicalTypeTag.DATE:
            return payload.isoformat()
        if tag is LogicalTypeTag.TIME:
            return payload.strftime("%H:%M:%S")
        if tag in _DATETIME_TAGS:
            return payload.strftime("%Y-%m-%d %H:%M:%S")
        if tag is LogicalTypeTag.VARCHAR:
            return str(payload)
        if tag is LogicalTypeTag.ROW_ID:
            return str(payload)
        if tag.is_vector_family():
            info = self._data_type.embedding_info
            return _vector_text(payload, info.element_type, tag.vector_depth)
        if tag is LogicalTypeTag.SPARSE:
            return self._sparse_text()
        raise UnsupportedLogicalTypeError(f"Cannot render {self._data_type} as text")

    def to_json(self) -> Any:
        """Native JSON representation."""
        tag = self._data_type.tag
        payload = self._payload

        if tag is LogicalTypeTag.BOOLEAN:
            return bool(payload)
        if tag in _INTEGER_TAGS:
            return int(payload)
        if tag in _FLOAT32_TAGS:
            return float(format_float(np.float32(payload)))
        if tag is LogicalTypeTag.DOUBLE:
            return float(payload)
        if tag in (LogicalTypeTag.DATE, LogicalTypeTag.TIME, LogicalTypeTag.VARCHAR):
            return self.to_string()
        if tag in _DATETIME_TAGS:
            return self.to_string()
        if tag is LogicalTypeTag.ROW_ID:
            rid: RowId = payload
            return rid.to_int()
        if tag.is_vector_family():
            info = self._data_type.embedding_info
            return _vector_json(payload, info.element_type, tag.vector_depth)
        if tag is LogicalTypeTag.SPARSE:
            return self._sparse_json()
        raise UnsupportedLogicalTypeError(f"Cannot render {self._data_type} as JSON")

    def append_to_json(self, name: str, record: dict[str, Any]) -> None:
        """Attach this value to a JSON object under the given key."""
        record[name] = self.to_json()

    def embedding_bytes(self, byteorder: str = "<") -> bytes:
        """Raw element bytes of an EMBEDDING value in the requested byte order."""
        info = self._data_type.embedding_info
        array = np.asarray(self._payload, dtype=info.element_type.dtype)
        return array.astype(array.dtype.newbyteorder(byteorder), copy=False).tobytes()

    def _sparse_text(self) -> str:
        sparse: SparseVector = self._payload
        info = self._data_type.sparse_info
        if sparse.values is None or info.data_type is ElementType.BIT:
            return "[" + ",".join(str(int(i)) for i in sparse.indices) + "]"
        pairs = (
            f"{int(i)}:{_element_text(v, info.data_type)}"
            for i, v in zip(sparse.indices, sparse.values)
        )
        return "[" + ",".join(pairs) + "]"

    def _sparse_json(self) -> Any:
        sparse: SparseVector = self._payload
        info = self._data_type.sparse_info
        if sparse.values is None or info.data_type is ElementType.BIT:
            return [int(i) for i in sparse.indices]
        return {
            str(int(i)): _element_json(v, info.data_type)
            for i, v in zip(sparse.indices, sparse.values)
        }
