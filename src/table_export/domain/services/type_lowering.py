"""Logical type lowering to the Arrow/Parquet physical type system.

Two functions cover the whole mapping:

    lower_type(data_type)   -> pyarrow DataType (schema fragment)
    make_builder(data_type) -> ColumnBuilder    (stateful value appender)

Scalars map one-to-one; 16-bit floats are widened to float32 and all
temporal types use second resolution. The vector family is a single
recursive case parameterized by nesting depth:

    EMBEDDING             fixed_size_list<elem, dim>                depth 0
    MULTIVECTOR / TENSOR  list<fixed_size_list<elem, dim>>          depth 1
    TENSOR_ARRAY          list<list<fixed_size_list<elem, dim>>>    depth 2

SPARSE is struct<index: list<int*>, value: list<elem>>, with the value
field omitted for bit (indices-only) sparse vectors.

Any other tag is not exportable and raises UnsupportedLogicalTypeError.
"""

from __future__ import annotations

import datetime
from typing import Any, Callable, Sequence

import numpy as np
import pyarrow as pa

from table_export.domain.entities import Value
from table_export.domain.errors import UnsupportedLogicalTypeError, VectorShapeError
from table_export.domain.value_objects import (
    DataType,
    ElementType,
    LogicalTypeTag,
    SparseInfo,
    SparseVector,
)

Encoder = Callable[[Any], Any]

_SCALAR_TYPES: dict[LogicalTypeTag, pa.DataType] = {
    LogicalTypeTag.BOOLEAN: pa.bool_(),
    LogicalTypeTag.TINYINT: pa.int8(),
    LogicalTypeTag.SMALLINT: pa.int16(),
    LogicalTypeTag.INTEGER: pa.int32(),
    LogicalTypeTag.BIGINT: pa.int64(),
    LogicalTypeTag.FLOAT16: pa.float32(),
    LogicalTypeTag.BFLOAT16: pa.float32(),
    LogicalTypeTag.FLOAT: pa.float32(),
    LogicalTypeTag.DOUBLE: pa.float64(),
    LogicalTypeTag.DATE: pa.date32(),
    LogicalTypeTag.TIME: pa.time32("s"),
    LogicalTypeTag.DATETIME: pa.timestamp("s"),
    LogicalTypeTag.TIMESTAMP: pa.timestamp("s"),
    LogicalTypeTag.VARCHAR: pa.string(),
}

_ELEMENT_TYPES: dict[ElementType, pa.DataType] = {
    ElementType.BIT: pa.bool_(),
    ElementType.INT8: pa.int8(),
    ElementType.INT16: pa.int16(),
    ElementType.INT32: pa.int32(),
    ElementType.INT64: pa.int64(),
    ElementType.UINT8: pa.uint8(),
    ElementType.FLOAT16: pa.float32(),
    ElementType.BFLOAT16: pa.float32(),
    ElementType.FLOAT: pa.float32(),
    ElementType.DOUBLE: pa.float64(),
}

# numpy dtype each element type is written as (16-bit floats widened)
_ELEMENT_OUTPUT_DTYPES: dict[ElementType, np.dtype] = {
    element_type: np.dtype(arrow_type.to_pandas_dtype())
    for element_type, arrow_type in _ELEMENT_TYPES.items()
}


def lower_type(data_type: DataType) -> pa.DataType:
    """Map a logical type to its Arrow type.

    Raises:
        UnsupportedLogicalTypeError: If the type cannot be exported.
    """
    tag = data_type.tag
    scalar = _SCALAR_TYPES.get(tag)
    if scalar is not None:
        return scalar
    if tag.is_vector_family():
        info = data_type.embedding_info
        return _vector_type(_element_type(info.element_type), info.dimension, tag.vector_depth)
    if tag is LogicalTypeTag.SPARSE:
        return _sparse_type(data_type.sparse_info)
    raise UnsupportedLogicalTypeError(f"Invalid data type for export: {data_type}")


def lower_field(name: str, data_type: DataType) -> pa.Field:
    """Arrow schema field for a named column."""
    return pa.field(name, lower_type(data_type))


def lower_schema(columns: Sequence[tuple[str, DataType]]) -> pa.Schema:
    """Arrow schema for (name, type) pairs in output order."""
    return pa.schema([lower_field(name, data_type) for name, data_type in columns])


def make_builder(data_type: DataType) -> ColumnBuilder:
    """Create an empty builder for one output column."""
    return ColumnBuilder(data_type)


class ColumnBuilder:
    """Accumulates values of one column and finishes them into an Arrow array.

    Builders live for one batch: values are appended in output order and
    finish() hands back an immutable array and resets the builder.

    Example:
        >>> builder = make_builder(DataType.embedding(ElementType.FLOAT, 2))
        >>> builder.append(Value(builder.data_type, np.array([1.0, 2.0], np.float32)))
        >>> builder.finish().type
        FixedSizeListType(fixed_size_list<item: float>[2])
    """

    def __init__(self, data_type: DataType) -> None:
        self._data_type = data_type
        self._arrow_type = lower_type(data_type)
        self._encode = _encoder(data_type)
        self._values: list[Any] = []

    @property
    def data_type(self) -> DataType:
        return self._data_type

    @property
    def arrow_type(self) -> pa.DataType:
        return self._arrow_type

    def __len__(self) -> int:
        return len(self._values)

    def append(self, value: Value) -> None:
        """Append one value.

        Raises:
            VectorShapeError: If the value's shape disagrees with the type.
        """
        self._values.append(self._encode(value.payload))

    def finish(self) -> pa.Array:
        array = pa.array(self._values, type=self._arrow_type)
        self._values = []
        return array


def _element_type(element_type: ElementType) -> pa.DataType:
    arrow_type = _ELEMENT_TYPES.get(element_type)
    if arrow_type is None:
        raise UnsupportedLogicalTypeError(f"Invalid element type: {element_type}")
    return arrow_type


def _vector_type(element: pa.DataType, dimension: int, depth: int) -> pa.DataType:
    if depth == 0:
        return pa.list_(element, dimension)
    return pa.list_(_vector_type(element, dimension, depth - 1))


def _sparse_type(info: SparseInfo) -> pa.DataType:
    if not info.index_type.is_integer_index():
        raise UnsupportedLogicalTypeError(f"Invalid sparse index type: {info.index_type}")
    fields = [pa.field("index", pa.list_(_element_type(info.index_type)))]
    if info.data_type is not ElementType.BIT:
        fields.append(pa.field("value", pa.list_(_element_type(info.data_type))))
    return pa.struct(fields)


def _encoder(data_type: DataType) -> Encoder:
    tag = data_type.tag
    if tag is LogicalTypeTag.BOOLEAN:
        return bool
    if tag in (
        LogicalTypeTag.TINYINT,
        LogicalTypeTag.SMALLINT,
        LogicalTypeTag.INTEGER,
        LogicalTypeTag.BIGINT,
    ):
        return int
    if tag in (
        LogicalTypeTag.FLOAT16,
        LogicalTypeTag.BFLOAT16,
        LogicalTypeTag.FLOAT,
        LogicalTypeTag.DOUBLE,
    ):
        return float
    if tag is LogicalTypeTag.DATE:
        return _identity
    if tag in (LogicalTypeTag.TIME, LogicalTypeTag.DATETIME, LogicalTypeTag.TIMESTAMP):
        return _truncate_to_seconds
    if tag is LogicalTypeTag.VARCHAR:
        return str
    if tag.is_vector_family():
        info = data_type.embedding_info
        return _vector_encoder(info.element_type, info.dimension, tag.vector_depth)
    if tag is LogicalTypeTag.SPARSE:
        return _sparse_encoder(data_type.sparse_info)
    raise UnsupportedLogicalTypeError(f"Invalid data type for export: {data_type}")


def _identity(payload: Any) -> Any:
    return payload


def _truncate_to_seconds(
    payload: datetime.time | datetime.datetime,
) -> datetime.time | datetime.datetime:
    return payload.replace(microsecond=0)


def _vector_encoder(element_type: ElementType, dimension: int, depth: int) -> Encoder:
    if depth > 0:
        inner = _vector_encoder(element_type, dimension, depth - 1)

        def encode_nested(payload: Any) -> list[Any]:
            if isinstance(payload, np.ndarray) and payload.ndim != depth + 1:
                raise VectorShapeError(
                    f"expected {depth + 1}-D payload, got shape {payload.shape}"
                )
            return [inner(p) for p in payload]

        return encode_nested

    output_dtype = _ELEMENT_OUTPUT_DTYPES[element_type]

    def encode_vector(payload: Any) -> list[Any]:
        array = np.asarray(payload)
        if array.ndim != 1 or array.shape[0] != dimension:
            raise VectorShapeError(
                f"expected vector of dimension {dimension}, got shape {array.shape}"
            )
        return array.astype(output_dtype, copy=False).tolist()

    return encode_vector


def _sparse_encoder(info: SparseInfo) -> Encoder:
    index_dtype = _ELEMENT_OUTPUT_DTYPES[info.index_type]
    with_values = info.data_type is not ElementType.BIT
    value_dtype = _ELEMENT_OUTPUT_DTYPES[info.data_type]

    def encode_sparse(payload: SparseVector) -> dict[str, list[Any]]:
        indices = np.asarray(payload.indices)
        if indices.size and (indices.min() < 0 or indices.max() >= info.dimension):
            raise VectorShapeError(
                f"sparse index out of range [0, {info.dimension}): {indices.tolist()}"
            )
        encoded = {"index": indices.astype(index_dtype, copy=False).tolist()}
        if with_values:
            if payload.values is None:
                raise VectorShapeError("sparse vector has no values but type carries data")
            encoded["value"] = np.asarray(payload.values).astype(value_dtype, copy=False).tolist()
        return encoded

    return encode_sparse
