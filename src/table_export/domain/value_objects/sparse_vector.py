"""In-memory payload of a SPARSE value."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True, eq=False)
class SparseVector:
    """Aligned index/value arrays of one sparse vector.

    Attributes:
        indices: Positions of the non-zero entries
        values: Entry values, or None for bit (indices-only) sparse vectors
    """

    indices: NDArray
    values: NDArray | None = None

    def __post_init__(self) -> None:
        if self.indices.ndim != 1:
            raise ValueError(f"indices must be 1-dimensional, got {self.indices.ndim}")
        if self.values is not None and self.values.shape != self.indices.shape:
            raise ValueError(
                f"indices/values length mismatch: {len(self.indices)} != {len(self.values)}"
            )

    @classmethod
    def from_pairs(
        cls,
        pairs: dict[int, float] | list[int],
        index_dtype: np.dtype | type = np.int32,
        value_dtype: np.dtype | type | None = np.float32,
    ) -> SparseVector:
        """Build from {index: value} (or a plain index list for bit vectors)."""
        if isinstance(pairs, dict):
            indices = np.fromiter(pairs.keys(), dtype=index_dtype, count=len(pairs))
            values = None
            if value_dtype is not None:
                values = np.fromiter(pairs.values(), dtype=value_dtype, count=len(pairs))
            return cls(indices, values)
        return cls(np.asarray(pairs, dtype=index_dtype), None)

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return len(self.indices)

    def __len__(self) -> int:
        return self.nnz
