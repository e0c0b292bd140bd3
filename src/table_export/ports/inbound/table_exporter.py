"""Table Exporter port: the entry point used by the query executor.

The executor resolves an ExportRequest (binder/planner output), takes a
TableSnapshot under the running transaction, and hands both to the
exporter. The call is synchronous and runs the whole export as a single
blocking unit of work.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from table_export.domain.entities import TableDef, TableSnapshot
from table_export.domain.value_objects import ExportRequest
from table_export.ports.outbound import ReadTransaction


@dataclass(frozen=True)
class ExportResult:
    """Completion report of a successful export.

    Attributes:
        row_count: Rows written across all files
        files: Output files in creation order
        message: Human-readable summary, e.g. "EXPORT 3 Rows"
    """

    row_count: int
    files: tuple[Path, ...] = field(default_factory=tuple)
    message: str = ""

    @property
    def success(self) -> bool:
        return self.message.startswith("EXPORT")


class TableExporter(Protocol):
    """Protocol for running an export."""

    @abstractmethod
    def export(
        self,
        request: ExportRequest,
        table: TableDef,
        snapshot: TableSnapshot,
        txn: ReadTransaction,
        should_cancel: Callable[[], bool] | None = None,
    ) -> ExportResult:
        """Export the snapshot according to the request.

        Args:
            request: Resolved export configuration.
            table: Catalog definition of the table.
            snapshot: Segments/blocks visible to the transaction.
            txn: Transaction supplying the read timestamp.
            should_cancel: Optional hook polled once per scanned row.

        Returns:
            The row count, output files and summary message.

        Raises:
            RecoverableExportError: On configuration/environment faults.
            InternalConsistencyError: On detected defects.
        """
        ...
