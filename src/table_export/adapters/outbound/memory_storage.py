"""In-memory table storage adapter.

A simple segment/block store implementing the BlockStorage and
VisibilityFilterFactory ports. Rows are appended column-wise into
segments of fixed capacity; each segment is cut into blocks of
block_capacity rows. Every row carries the commit timestamp that created
it and, once deleted, the commit timestamp of the delete.

Useful for testing and for embedding the export engine without a paging
layer. Data is not persisted.

Usage:
    storage = InMemoryTableStorage(table, block_capacity=4)
    storage.append_rows([(1, "a"), (2, "b")], commit_ts=TxnTimestamp(10))
    snapshot = storage.snapshot()
    txn = SnapshotTransaction(TxnTimestamp(20))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from table_export.domain.entities import (
    BlockEntry,
    ColumnVector,
    SegmentSnapshot,
    TableDef,
    TableSnapshot,
)
from table_export.domain.value_objects import (
    DEFAULT_BLOCK_CAPACITY,
    BlockId,
    DataType,
    LogicalTypeTag,
    RowId,
    SegmentId,
    SegmentOffset,
    TxnTimestamp,
)
from table_export.ports.outbound import VisibilityFilter

NOT_DELETED = TxnTimestamp((1 << 63) - 1)
"""Delete timestamp reported for rows that were never deleted."""

_TIMESTAMP_TYPE = DataType.scalar(LogicalTypeTag.BIGINT)


@dataclass(frozen=True)
class SnapshotTransaction:
    """Read-only transaction pinned at a timestamp."""

    read_timestamp: TxnTimestamp


@dataclass
class _Segment:
    """Column-wise row storage of one segment."""

    segment_id: SegmentId
    columns: list[list[Any]]
    create_ts: list[int] = field(default_factory=list)
    delete_ts: list[int] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.create_ts)


class InMemoryTableStorage:
    """In-memory implementation of BlockStorage and VisibilityFilterFactory.

    Visibility follows snapshot isolation: a row at segment offset o is
    visible at read timestamp t iff

        o < base_offset  and  create_ts <= t  and  (not deleted or delete_ts > t)
    """

    def __init__(
        self,
        table: TableDef,
        block_capacity: int = DEFAULT_BLOCK_CAPACITY,
        blocks_per_segment: int = 8,
    ) -> None:
        """Initialize empty storage.

        Args:
            table: Catalog definition; rows must match its column count.
            block_capacity: Rows per block.
            blocks_per_segment: Blocks per segment before a new one starts.
        """
        if block_capacity <= 0:
            raise ValueError(f"block_capacity must be positive, got {block_capacity}")
        if blocks_per_segment <= 0:
            raise ValueError(f"blocks_per_segment must be positive, got {blocks_per_segment}")
        self._table = table
        self._block_capacity = block_capacity
        self._segment_capacity = block_capacity * blocks_per_segment
        self._segments: dict[SegmentId, _Segment] = {}

    @property
    def table(self) -> TableDef:
        return self._table

    @property
    def block_capacity(self) -> int:
        return self._block_capacity

    @property
    def row_count(self) -> int:
        return sum(segment.row_count for segment in self._segments.values())

    def append_rows(
        self, rows: Sequence[Sequence[Any]], commit_ts: TxnTimestamp
    ) -> list[RowId]:
        """Append rows committed at commit_ts.

        Args:
            rows: One tuple of payloads per row, in catalog column order.
            commit_ts: Commit timestamp of the inserting transaction.

        Returns:
            The row id assigned to each row.

        Raises:
            ValueError: If a row's width differs from the table's.
        """
        width = len(self._table)
        row_ids = []
        for row in rows:
            if len(row) != width:
                raise ValueError(f"row has {len(row)} values, table has {width} columns")
            segment = self._writable_segment()
            row_ids.append(RowId(segment.segment_id, SegmentOffset(segment.row_count)))
            for column, payload in zip(segment.columns, row):
                column.append(payload)
            segment.create_ts.append(commit_ts)
            segment.delete_ts.append(NOT_DELETED)
        return row_ids

    def delete_row(self, row_id: RowId, commit_ts: TxnTimestamp) -> None:
        """Record a delete of row_id committed at commit_ts.

        Raises:
            KeyError: If the row does not exist or is already deleted.
        """
        segment = self._segments.get(row_id.segment_id)
        if segment is None or row_id.segment_offset >= segment.row_count:
            raise KeyError(f"No such row: {row_id}")
        if segment.delete_ts[row_id.segment_offset] != NOT_DELETED:
            raise KeyError(f"Row already deleted: {row_id}")
        segment.delete_ts[row_id.segment_offset] = commit_ts

    def snapshot(self) -> TableSnapshot:
        """Capture the current segments and blocks.

        Rows appended after this call lie beyond each segment's
        visible_row_base_offset and are never exported from the snapshot.
        """
        segments = {}
        for segment_id, segment in self._segments.items():
            blocks = []
            for block_no, start in enumerate(range(0, segment.row_count, self._block_capacity)):
                blocks.append(
                    BlockEntry(
                        segment_id=segment_id,
                        block_id=BlockId(block_no),
                        segment_offset=SegmentOffset(start),
                        row_count=min(self._block_capacity, segment.row_count - start),
                    )
                )
            segments[segment_id] = SegmentSnapshot(
                segment_id=segment_id,
                segment_entry=segment_id,
                visible_row_base_offset=segment.row_count,
                blocks=tuple(blocks),
            )
        return TableSnapshot(segments)

    # BlockStorage

    def fetch_column(self, block: BlockEntry, column_id: int) -> ColumnVector:
        segment = self._segments[block.segment_id]
        column_def = self._table.column(column_id)
        data = segment.columns[column_id][self._block_slice(block, 0, block.row_count)]
        return ColumnVector(column_def.data_type, data)

    def fetch_create_timestamps(
        self, block: BlockEntry, begin: int, count: int
    ) -> ColumnVector:
        segment = self._segments[block.segment_id]
        return ColumnVector(_TIMESTAMP_TYPE, segment.create_ts[self._block_slice(block, begin, count)])

    def fetch_delete_timestamps(
        self, block: BlockEntry, begin: int, count: int
    ) -> ColumnVector:
        segment = self._segments[block.segment_id]
        return ColumnVector(_TIMESTAMP_TYPE, segment.delete_ts[self._block_slice(block, begin, count)])

    # VisibilityFilterFactory

    def build_filter(
        self, segment_entry: Any, read_ts: TxnTimestamp, base_offset: int
    ) -> VisibilityFilter:
        segment = self._segments[segment_entry]
        create_ts = segment.create_ts
        delete_ts = segment.delete_ts

        def visible(offset: int) -> bool:
            if offset >= base_offset:
                return False
            if create_ts[offset] > read_ts:
                return False
            return delete_ts[offset] > read_ts

        return visible

    def _writable_segment(self) -> _Segment:
        if self._segments:
            last = self._segments[max(self._segments)]
            if last.row_count < self._segment_capacity:
                return last
            segment_id = SegmentId(last.segment_id + 1)
        else:
            segment_id = SegmentId(0)
        segment = _Segment(segment_id, [[] for _ in range(len(self._table))])
        self._segments[segment_id] = segment
        return segment

    @staticmethod
    def _block_slice(block: BlockEntry, begin: int, count: int) -> slice:
        start = block.segment_offset + begin
        return slice(start, start + count)
