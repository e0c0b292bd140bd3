"""Block Storage port for reading column data out of the paging layer.

This outbound port is the only way the export engine touches stored data.
The paging/buffer-pool subsystem behind it is responsible for pinning,
decompression and caching; the engine just asks for one column of one
block at a time and drops the vector before moving to the next block.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from table_export.domain.entities import BlockEntry, ColumnVector


class BlockStorage(Protocol):
    """Protocol for fetching column vectors of a block.

    Thread Safety:
        Implementations must tolerate concurrent appends to the table;
        vectors returned for a snapshot block must not change afterwards.
    """

    @abstractmethod
    def fetch_column(self, block: BlockEntry, column_id: int) -> ColumnVector:
        """Return the stored values of a catalog column for the block.

        Args:
            block: The block to read.
            column_id: Catalog index of the column.

        Returns:
            A vector that should hold exactly block.row_count values.
            The caller verifies the length.
        """
        ...

    @abstractmethod
    def fetch_create_timestamps(
        self, block: BlockEntry, begin: int, count: int
    ) -> ColumnVector:
        """Return the commit timestamps that created rows [begin, begin + count).

        Args:
            block: The block to read.
            begin: First row, relative to the block.
            count: Number of rows.
        """
        ...

    @abstractmethod
    def fetch_delete_timestamps(
        self, block: BlockEntry, begin: int, count: int
    ) -> ColumnVector:
        """Return the commit timestamps that deleted rows [begin, begin + count).

        Rows that were never deleted report the storage layer's
        "not deleted" sentinel.
        """
        ...
