"""Visibility port: the seam to the MVCC subsystem.

The export engine never inspects delete-tracking structures. It asks the
visibility subsystem for a predicate per segment and calls it with
segment-relative row offsets, in any order.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Protocol

from table_export.domain.value_objects import TxnTimestamp

VisibilityFilter = Callable[[int], bool]
"""Segment-relative row offset -> visible under the snapshot."""


class VisibilityFilterFactory(Protocol):
    """Builds the per-segment visibility predicate."""

    @abstractmethod
    def build_filter(
        self,
        segment_entry: Any,
        read_ts: TxnTimestamp,
        base_offset: int,
    ) -> VisibilityFilter:
        """Create a visibility predicate for one segment.

        Args:
            segment_entry: Opaque segment handle from the SegmentSnapshot.
            read_ts: Read timestamp of the exporting transaction.
            base_offset: Rows at or beyond this offset are not visible.

        Returns:
            A pure function of the row offset.
        """
        ...


class ReadTransaction(Protocol):
    """The part of a transaction the export engine needs."""

    @property
    @abstractmethod
    def read_timestamp(self) -> TxnTimestamp:
        """Timestamp the transaction's snapshot was taken at."""
        ...
