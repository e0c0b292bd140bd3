"""Column materialization: one ColumnVector per (block, selector).

Physical columns and the created/deleted timestamp columns are read
through the BlockStorage port. The row-id column is synthesized from the
block id and the block capacity without touching storage.
"""

from __future__ import annotations

from typing import Sequence

from table_export.domain.entities import BlockEntry, ColumnVector
from table_export.domain.errors import ColumnLengthMismatchError
from table_export.domain.value_objects import (
    DEFAULT_BLOCK_CAPACITY,
    ColumnSelector,
    SelectorKind,
)
from table_export.ports.outbound import BlockStorage


class ColumnMaterializer:
    """Produces block-sized column vectors for the scan driver."""

    def __init__(
        self,
        storage: BlockStorage,
        block_capacity: int = DEFAULT_BLOCK_CAPACITY,
    ) -> None:
        """Initialize the materializer.

        Args:
            storage: Paging layer port.
            block_capacity: Rows per block, used to derive row ids.
        """
        self._storage = storage
        self._block_capacity = block_capacity

    @property
    def block_capacity(self) -> int:
        return self._block_capacity

    def materialize(self, block: BlockEntry, selector: ColumnSelector) -> ColumnVector:
        """Return the values of one column for every row of the block.

        Raises:
            ColumnLengthMismatchError: If storage returns a vector whose
                length differs from block.row_count.
        """
        if selector.kind is SelectorKind.ROW_ID:
            start = block.block_id * self._block_capacity
            vector = ColumnVector.row_ids(block.segment_id, start, block.row_count)
        elif selector.kind is SelectorKind.CREATE_TIMESTAMP:
            vector = self._storage.fetch_create_timestamps(block, 0, block.row_count)
        elif selector.kind is SelectorKind.DELETE_TIMESTAMP:
            vector = self._storage.fetch_delete_timestamps(block, 0, block.row_count)
        else:
            vector = self._storage.fetch_column(block, selector.column_id)

        if len(vector) != block.row_count:
            raise ColumnLengthMismatchError(
                f"Unmatched row_count between block and block_column: "
                f"segment {block.segment_id} block {block.block_id} has "
                f"{block.row_count} rows, column vector has {len(vector)}"
            )
        return vector

    def materialize_all(
        self, block: BlockEntry, selectors: Sequence[ColumnSelector]
    ) -> list[ColumnVector]:
        """Materialize every selected column of a block, in selector order."""
        return [self.materialize(block, selector) for selector in selectors]
