"""Unit tests for value rendering (text and JSON)."""

from __future__ import annotations

import datetime
import struct

import numpy as np
import pytest

from table_export.domain.entities import ColumnVector, Value
from table_export.domain.errors import UnsupportedLogicalTypeError
from table_export.domain.value_objects import (
    DataType,
    ElementType,
    LogicalTypeTag,
    RowId,
    SegmentId,
    SegmentOffset,
    SparseVector,
)


def scalar(tag: LogicalTypeTag, payload: object) -> Value:
    return Value(DataType.scalar(tag), payload)


@pytest.mark.unit
class TestValueText:
    """Tests for Value.to_string."""

    @pytest.mark.parametrize(
        "tag,payload,expected",
        [
            (LogicalTypeTag.BOOLEAN, True, "true"),
            (LogicalTypeTag.BOOLEAN, False, "false"),
            (LogicalTypeTag.TINYINT, -3, "-3"),
            (LogicalTypeTag.BIGINT, 1 << 40, str(1 << 40)),
            (LogicalTypeTag.FLOAT, 1.5, "1.5"),
            (LogicalTypeTag.FLOAT, 0.1, "0.1"),
            (LogicalTypeTag.DOUBLE, 0.1, "0.1"),
            (LogicalTypeTag.DATE, datetime.date(2024, 1, 2), "2024-01-02"),
            (LogicalTypeTag.TIME, datetime.time(1, 2, 3, 456), "01:02:03"),
            (
                LogicalTypeTag.TIMESTAMP,
                datetime.datetime(2024, 1, 2, 3, 4, 5),
                "2024-01-02 03:04:05",
            ),
            (LogicalTypeTag.VARCHAR, "hello", "hello"),
        ],
    )
    def test_scalars(self, tag: LogicalTypeTag, payload: object, expected: str) -> None:
        assert scalar(tag, payload).to_string() == expected

    def test_row_id(self) -> None:
        rid = RowId(SegmentId(0), SegmentOffset(5))
        assert scalar(LogicalTypeTag.ROW_ID, rid).to_string() == "0:5"

    def test_float_embedding(self) -> None:
        value = Value(
            DataType.embedding(ElementType.FLOAT, 2), np.array([1.0, 2.0], dtype=np.float32)
        )
        assert value.to_string() == "[1.0,2.0]"

    def test_int_embedding(self) -> None:
        value = Value(DataType.embedding(ElementType.INT8, 2), np.array([1, -2], dtype=np.int8))
        assert value.to_string() == "[1,-2]"

    def test_bit_embedding(self) -> None:
        value = Value(DataType.embedding(ElementType.BIT, 3), np.array([True, False, True]))
        assert value.to_string() == "[1,0,1]"

    def test_multivector(self) -> None:
        value = Value(
            DataType.multivector(ElementType.FLOAT, 2),
            np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32),
        )
        assert value.to_string() == "[[1.0,2.0],[3.0,4.0]]"

    def test_tensor_array(self) -> None:
        payload = [
            np.array([[1, 2]], dtype=np.int32),
            np.array([[3, 4], [5, 6]], dtype=np.int32),
        ]
        value = Value(DataType.tensor_array(ElementType.INT32, 2), payload)
        assert value.to_string() == "[[[1,2]],[[3,4],[5,6]]]"

    def test_sparse(self) -> None:
        value = Value(
            DataType.sparse(ElementType.FLOAT, ElementType.INT32, 10),
            SparseVector.from_pairs({1: 0.5, 7: 2.0}),
        )
        assert value.to_string() == "[1:0.5,7:2.0]"

    def test_bit_sparse(self) -> None:
        value = Value(
            DataType.sparse(ElementType.BIT, ElementType.INT32, 10),
            SparseVector.from_pairs([3, 4, 9]),
        )
        assert value.to_string() == "[3,4,9]"

    def test_unsupported(self) -> None:
        with pytest.raises(UnsupportedLogicalTypeError):
            scalar(LogicalTypeTag.HUGEINT, 1).to_string()


@pytest.mark.unit
class TestValueJSON:
    """Tests for Value.to_json."""

    def test_scalars(self) -> None:
        assert scalar(LogicalTypeTag.BOOLEAN, 1).to_json() is True
        assert scalar(LogicalTypeTag.INTEGER, 7).to_json() == 7
        assert scalar(LogicalTypeTag.FLOAT, 0.1).to_json() == 0.1
        assert scalar(LogicalTypeTag.VARCHAR, "x").to_json() == "x"
        assert scalar(LogicalTypeTag.DATE, datetime.date(2024, 1, 2)).to_json() == "2024-01-02"

    def test_row_id_packed(self) -> None:
        rid = RowId(SegmentId(1), SegmentOffset(2))
        assert scalar(LogicalTypeTag.ROW_ID, rid).to_json() == (1 << 32) | 2

    def test_embedding(self) -> None:
        value = Value(
            DataType.embedding(ElementType.FLOAT, 2), np.array([0.1, 2.0], dtype=np.float32)
        )
        assert value.to_json() == [0.1, 2.0]

    def test_sparse(self) -> None:
        value = Value(
            DataType.sparse(ElementType.FLOAT, ElementType.INT32, 10),
            SparseVector.from_pairs({1: 0.5, 7: 2.0}),
        )
        assert value.to_json() == {"1": 0.5, "7": 2.0}

    def test_append_to_json(self) -> None:
        record: dict[str, object] = {}
        scalar(LogicalTypeTag.INTEGER, 1).append_to_json("id", record)
        scalar(LogicalTypeTag.VARCHAR, "a").append_to_json("name", record)
        assert record == {"id": 1, "name": "a"}


@pytest.mark.unit
class TestEmbeddingBytes:
    """Tests for Value.embedding_bytes."""

    def test_little_endian_float32(self) -> None:
        value = Value(
            DataType.embedding(ElementType.FLOAT, 2), np.array([1.0, 2.0], dtype=np.float32)
        )
        assert value.embedding_bytes("<") == struct.pack("<2f", 1.0, 2.0)

    def test_big_endian(self) -> None:
        value = Value(DataType.embedding(ElementType.FLOAT, 1), np.array([1.0], dtype=np.float32))
        assert value.embedding_bytes(">") == struct.pack(">f", 1.0)


@pytest.mark.unit
class TestColumnVector:
    """Tests for ColumnVector."""

    def test_numpy_scalars_unwrapped(self) -> None:
        vector = ColumnVector(
            DataType.scalar(LogicalTypeTag.INTEGER), np.array([1, 2, 3], dtype=np.int32)
        )
        value = vector.get_value(1)
        assert value.payload == 2
        assert type(value.payload) is int

    def test_row_ids(self) -> None:
        vector = ColumnVector.row_ids(SegmentId(2), 8, 3)
        assert len(vector) == 3
        assert [vector.get_value(i).to_string() for i in range(3)] == ["2:8", "2:9", "2:10"]
