"""Logical column types of the database.

A DataType is a LogicalTypeTag plus, for the vector family and sparse
vectors, a type-info record describing element type and dimension.
Only a subset of the tags can be exported; the rest exist so that the
export path can recognise and reject them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

import numpy as np


class LogicalTypeTag(Enum):
    """Closed enumeration of logical column types."""

    BOOLEAN = auto()
    TINYINT = auto()
    SMALLINT = auto()
    INTEGER = auto()
    BIGINT = auto()
    HUGEINT = auto()
    FLOAT16 = auto()
    BFLOAT16 = auto()
    FLOAT = auto()
    DOUBLE = auto()
    DECIMAL = auto()
    DATE = auto()
    TIME = auto()
    DATETIME = auto()
    TIMESTAMP = auto()
    INTERVAL = auto()
    VARCHAR = auto()
    EMBEDDING = auto()
    MULTIVECTOR = auto()
    TENSOR = auto()
    TENSOR_ARRAY = auto()
    SPARSE = auto()
    ROW_ID = auto()
    ARRAY = auto()
    TUPLE = auto()
    POINT = auto()
    LINE = auto()
    LINE_SEG = auto()
    BOX = auto()
    CIRCLE = auto()
    UUID = auto()
    MIXED = auto()
    NULL = auto()
    MISSING = auto()
    EMPTY_ARRAY = auto()
    INVALID = auto()

    @property
    def vector_depth(self) -> int | None:
        """Extra list nesting around a fixed-width vector, or None outside the family.

        EMBEDDING is a bare vector (0), MULTIVECTOR/TENSOR a list of vectors (1),
        TENSOR_ARRAY a list of tensors (2).
        """
        return _VECTOR_DEPTH.get(self)

    def is_vector_family(self) -> bool:
        return self in _VECTOR_DEPTH


_VECTOR_DEPTH = {
    LogicalTypeTag.EMBEDDING: 0,
    LogicalTypeTag.MULTIVECTOR: 1,
    LogicalTypeTag.TENSOR: 1,
    LogicalTypeTag.TENSOR_ARRAY: 2,
}


class ElementType(Enum):
    """Element type of vectors and sparse vectors.

    Values are (name, numpy storage dtype). BFLOAT16 has no numpy dtype and
    is held as float32 in memory.
    """

    BIT = ("bit", np.bool_)
    INT8 = ("int8", np.int8)
    INT16 = ("int16", np.int16)
    INT32 = ("int32", np.int32)
    INT64 = ("int64", np.int64)
    FLOAT = ("float", np.float32)
    DOUBLE = ("double", np.float64)
    UINT8 = ("uint8", np.uint8)
    FLOAT16 = ("float16", np.float16)
    BFLOAT16 = ("bfloat16", np.float32)

    @property
    def type_name(self) -> str:
        return self.value[0]

    @property
    def dtype(self) -> np.dtype:
        """numpy dtype used to hold elements of this type in memory."""
        return np.dtype(self.value[1])

    def is_floating(self) -> bool:
        return self in (
            ElementType.FLOAT,
            ElementType.DOUBLE,
            ElementType.FLOAT16,
            ElementType.BFLOAT16,
        )

    def is_integer_index(self) -> bool:
        """Whether the type may be used as the index type of a sparse vector."""
        return self in (
            ElementType.INT8,
            ElementType.INT16,
            ElementType.INT32,
            ElementType.INT64,
        )


@dataclass(frozen=True, slots=True)
class EmbeddingInfo:
    """Type info for EMBEDDING / MULTIVECTOR / TENSOR / TENSOR_ARRAY.

    Attributes:
        element_type: Type of a single vector element
        dimension: Fixed width of one vector
    """

    element_type: ElementType
    dimension: int

    def __post_init__(self) -> None:
        if self.dimension <= 0:
            raise ValueError(f"dimension must be positive, got {self.dimension}")


@dataclass(frozen=True, slots=True)
class SparseInfo:
    """Type info for SPARSE.

    Attributes:
        data_type: Type of the stored values (BIT means indices only)
        index_type: Integer type of the indices
        dimension: Upper bound (exclusive) on indices
    """

    data_type: ElementType
    index_type: ElementType
    dimension: int

    def __post_init__(self) -> None:
        if self.dimension <= 0:
            raise ValueError(f"dimension must be positive, got {self.dimension}")


@dataclass(frozen=True, slots=True)
class DataType:
    """A logical column type.

    Example:
        >>> DataType.embedding(ElementType.FLOAT, 4).to_string()
        'Embedding(float,4)'
    """

    tag: LogicalTypeTag
    type_info: EmbeddingInfo | SparseInfo | None = None

    def __post_init__(self) -> None:
        if self.tag.is_vector_family() and not isinstance(self.type_info, EmbeddingInfo):
            raise ValueError(f"{self.tag.name} requires EmbeddingInfo")
        if self.tag is LogicalTypeTag.SPARSE and not isinstance(self.type_info, SparseInfo):
            raise ValueError("SPARSE requires SparseInfo")

    @classmethod
    def scalar(cls, tag: LogicalTypeTag) -> DataType:
        return cls(tag)

    @classmethod
    def embedding(cls, element_type: ElementType, dimension: int) -> DataType:
        return cls(LogicalTypeTag.EMBEDDING, EmbeddingInfo(element_type, dimension))

    @classmethod
    def multivector(cls, element_type: ElementType, dimension: int) -> DataType:
        return cls(LogicalTypeTag.MULTIVECTOR, EmbeddingInfo(element_type, dimension))

    @classmethod
    def tensor(cls, element_type: ElementType, dimension: int) -> DataType:
        return cls(LogicalTypeTag.TENSOR, EmbeddingInfo(element_type, dimension))

    @classmethod
    def tensor_array(cls, element_type: ElementType, dimension: int) -> DataType:
        return cls(LogicalTypeTag.TENSOR_ARRAY, EmbeddingInfo(element_type, dimension))

    @classmethod
    def sparse(
        cls, data_type: ElementType, index_type: ElementType, dimension: int
    ) -> DataType:
        return cls(LogicalTypeTag.SPARSE, SparseInfo(data_type, index_type, dimension))

    @property
    def embedding_info(self) -> EmbeddingInfo:
        if not isinstance(self.type_info, EmbeddingInfo):
            raise TypeError(f"{self.to_string()} has no embedding info")
        return self.type_info

    @property
    def sparse_info(self) -> SparseInfo:
        if not isinstance(self.type_info, SparseInfo):
            raise TypeError(f"{self.to_string()} has no sparse info")
        return self.type_info

    def to_string(self) -> str:
        name = self.tag.name.title().replace("_", "")
        if isinstance(self.type_info, EmbeddingInfo):
            return f"{name}({self.type_info.element_type.type_name},{self.type_info.dimension})"
        if isinstance(self.type_info, SparseInfo):
            info = self.type_info
            return (
                f"{name}({info.data_type.type_name},{info.index_type.type_name},"
                f"{info.dimension})"
            )
        return name

    def __str__(self) -> str:
        return self.to_string()
