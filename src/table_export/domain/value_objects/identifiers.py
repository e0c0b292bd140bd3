"""Storage identifiers and type-safe primitives for the export engine.

These mirror the identifiers of the storage layer so that segment ids,
block ids and transaction timestamps are never confused with plain
integers such as row offsets or column indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType


SegmentId = NewType("SegmentId", int)
"""Identifier of an append-only segment of a table."""

BlockId = NewType("BlockId", int)
"""Identifier of a block within its segment. Blocks are numbered from 0."""

SegmentOffset = NewType("SegmentOffset", int)
"""Row offset relative to the start of a segment."""

TxnTimestamp = NewType("TxnTimestamp", int)
"""Commit/begin timestamp handed out by the transaction manager."""

DEFAULT_BLOCK_CAPACITY = 8192
"""Rows per block unless the storage layer is configured otherwise."""

# Sentinel column ids used by callers to request the virtual columns.
# They sit at the top of the unsigned 64-bit range and never collide
# with a catalog column index.
COLUMN_IDENTIFIER_ROW_ID = (1 << 64) - 2
COLUMN_IDENTIFIER_CREATE = (1 << 64) - 3
COLUMN_IDENTIFIER_DELETE = (1 << 64) - 4


@dataclass(frozen=True, slots=True, order=True)
class RowId:
    """Composite row identifier: (segment id, offset inside the segment).

    Example:
        >>> rid = RowId(SegmentId(2), SegmentOffset(10))
        >>> str(rid)
        '2:10'
        >>> rid.to_int()
        8589934602
    """

    segment_id: SegmentId
    segment_offset: SegmentOffset

    def __post_init__(self) -> None:
        if self.segment_id < 0 or self.segment_id >= 1 << 32:
            raise ValueError(f"segment_id out of range: {self.segment_id}")
        if self.segment_offset < 0 or self.segment_offset >= 1 << 32:
            raise ValueError(f"segment_offset out of range: {self.segment_offset}")

    def __str__(self) -> str:
        return f"{self.segment_id}:{self.segment_offset}"

    def to_int(self) -> int:
        """Pack into a single 64-bit integer (segment id in the high word)."""
        return (self.segment_id << 32) | self.segment_offset

    @classmethod
    def from_int(cls, packed: int) -> RowId:
        """Inverse of to_int()."""
        return cls(SegmentId(packed >> 32), SegmentOffset(packed & 0xFFFFFFFF))
