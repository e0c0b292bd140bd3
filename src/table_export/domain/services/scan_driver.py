"""Scan driver: the iteration skeleton shared by every export encoding.

    for segment in snapshot (ascending segment id):
        visible = build visibility filter for segment
        for block in segment (storage order):
            columns = materialize selected columns of block
            for row in block (ascending):
                skip if not visible
                skip while offset budget remains
                emit to sink
                rotate sink if the per-file budget is used up
                stop everything if the row limit is reached

Offset and limit count only visible rows. Hitting the limit is the only
early exit; it is reported as ScanSignal.STOP from the row loop and
unwinds the block and segment loops in turn. The sink is told about the
end of every block it started, including the one the limit stopped in;
on a fault the exception propagates and the caller closes the sink.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Sequence

from table_export.domain.entities import BlockEntry, SegmentSnapshot, TableSnapshot
from table_export.domain.errors import ExportCancelledError
from table_export.domain.services.column_materializer import ColumnMaterializer
from table_export.domain.value_objects import ColumnSelector, TxnTimestamp
from table_export.infrastructure.logging import get_logger
from table_export.ports.outbound import (
    ExportSink,
    VisibilityFilter,
    VisibilityFilterFactory,
)

logger = get_logger(__name__)


class ScanSignal(Enum):
    """Outcome of scanning a block or segment."""

    CONTINUE = auto()
    STOP = auto()


@dataclass
class ScanStats:
    """Counters of one scan."""

    rows_emitted: int = 0
    rows_skipped_invisible: int = 0
    rows_skipped_offset: int = 0
    segments_scanned: int = 0
    blocks_scanned: int = 0


class ScanDriver:
    """Walks a table snapshot and feeds surviving rows to a sink.

    A driver instance runs a single scan; its offset/limit bookkeeping is
    not reset between runs.
    """

    def __init__(
        self,
        snapshot: TableSnapshot,
        selectors: Sequence[ColumnSelector],
        materializer: ColumnMaterializer,
        visibility: VisibilityFilterFactory,
        read_ts: TxnTimestamp,
        offset: int = 0,
        limit: int = 0,
        row_limit: int = 0,
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            snapshot: Segments and blocks to scan.
            selectors: Columns to materialize per block, in output order.
            materializer: Produces column vectors.
            visibility: Builds the per-segment visibility filter.
            read_ts: Read timestamp of the exporting transaction.
            offset: Visible rows to skip before emitting.
            limit: Rows to emit before stopping (0 = no limit).
            row_limit: Rows per output file (0 = never rotate).
            should_cancel: Polled once per row; True aborts the scan.
        """
        self._snapshot = snapshot
        self._selectors = tuple(selectors)
        self._materializer = materializer
        self._visibility = visibility
        self._read_ts = read_ts
        self._offset_remaining = offset
        self._limit = limit
        self._row_limit = row_limit
        self._should_cancel = should_cancel
        self._stats = ScanStats()

    @property
    def stats(self) -> ScanStats:
        return self._stats

    @property
    def row_count(self) -> int:
        return self._stats.rows_emitted

    def run(self, sink: ExportSink) -> int:
        """Scan the snapshot into an already opened sink.

        Returns:
            Number of rows emitted.
        """
        logger.debug("Going to export segments", segment_count=len(self._snapshot))
        for segment in self._snapshot:
            if self._scan_segment(segment, sink) is ScanSignal.STOP:
                break
        return self._stats.rows_emitted

    def _scan_segment(self, segment: SegmentSnapshot, sink: ExportSink) -> ScanSignal:
        visible = self._visibility.build_filter(
            segment.segment_entry, self._read_ts, segment.visible_row_base_offset
        )
        self._stats.segments_scanned += 1
        logger.debug(
            "Export segment",
            segment_id=segment.segment_id,
            block_count=len(segment.blocks),
        )
        for block in segment.blocks:
            if self._scan_block(block, visible, sink) is ScanSignal.STOP:
                return ScanSignal.STOP
        return ScanSignal.CONTINUE

    def _scan_block(
        self, block: BlockEntry, visible: VisibilityFilter, sink: ExportSink
    ) -> ScanSignal:
        logger.debug("Export block", segment_id=block.segment_id, block_id=block.block_id)
        self._stats.blocks_scanned += 1
        columns = self._materializer.materialize_all(block, self._selectors)
        sink.begin_block(columns)
        signal = ScanSignal.CONTINUE
        for row_idx in range(block.row_count):
            signal = self._emit_row(block, row_idx, visible, sink)
            if signal is ScanSignal.STOP:
                break
        sink.end_block()
        return signal

    def _emit_row(
        self,
        block: BlockEntry,
        row_idx: int,
        visible: VisibilityFilter,
        sink: ExportSink,
    ) -> ScanSignal:
        if self._should_cancel is not None and self._should_cancel():
            raise ExportCancelledError(
                f"Export cancelled after {self._stats.rows_emitted} rows"
            )
        if not visible(block.segment_offset + row_idx):
            self._stats.rows_skipped_invisible += 1
            return ScanSignal.CONTINUE
        if self._offset_remaining > 0:
            self._offset_remaining -= 1
            self._stats.rows_skipped_offset += 1
            return ScanSignal.CONTINUE

        sink.write_row(row_idx)
        self._stats.rows_emitted += 1

        emitted = self._stats.rows_emitted
        if self._row_limit and emitted % self._row_limit == 0:
            sink.request_rotation()
        if self._limit and emitted == self._limit:
            return ScanSignal.STOP
        return ScanSignal.CONTINUE
