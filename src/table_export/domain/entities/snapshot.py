"""Table snapshot: the segments and blocks visible to one export.

A TableSnapshot is taken once, before the scan, and is not modified while
the export runs. Concurrent writers append to new blocks or record deletes
that the visibility filter hides, so the scan never needs a table lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from table_export.domain.value_objects import BlockId, SegmentId, SegmentOffset


@dataclass(frozen=True, slots=True)
class BlockEntry:
    """Non-owning reference to one storage block.

    Attributes:
        segment_id: Segment the block belongs to
        block_id: Block number inside the segment
        segment_offset: Offset of the block's first row inside the segment
        row_count: Rows stored in the block when the snapshot was taken
    """

    segment_id: SegmentId
    block_id: BlockId
    segment_offset: SegmentOffset
    row_count: int

    def __post_init__(self) -> None:
        if self.row_count < 0:
            raise ValueError(f"row_count must be non-negative, got {self.row_count}")


@dataclass(frozen=True)
class SegmentSnapshot:
    """One segment as seen by the export.

    Attributes:
        segment_id: Identifier of the segment
        segment_entry: Opaque handle used by the visibility subsystem
        visible_row_base_offset: Rows at or beyond this segment offset were
            appended after the snapshot and are never visible
        blocks: Blocks of the segment in storage order
    """

    segment_id: SegmentId
    segment_entry: Any
    visible_row_base_offset: int
    blocks: tuple[BlockEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))

    @property
    def row_count(self) -> int:
        return sum(block.row_count for block in self.blocks)


@dataclass(frozen=True)
class TableSnapshot:
    """Segment id -> SegmentSnapshot, iterated in ascending segment id order."""

    segments: Mapping[SegmentId, SegmentSnapshot] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", dict(sorted(self.segments.items())))

    def __iter__(self) -> Iterator[SegmentSnapshot]:
        return iter(self.segments.values())

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def block_count(self) -> int:
        return sum(len(segment.blocks) for segment in self.segments.values())
