"""Export Sink port: encoding-specific consumer of scanned rows.

The scan driver is encoding-agnostic. For every block it hands the sink
the block's column vectors, then the index of each row that survived
visibility and offset filtering. When the per-file row budget is used up
it tells the sink to rotate; the sink defers the actual switch until the
next row arrives so that no trailing empty file is ever created.

Lifecycle:

    open() ──> [begin_block() ──> write_row()* ──> end_block()]* ──> close()
                                      │
                               request_rotation()
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, Sequence

from table_export.domain.entities import ColumnVector


class ExportSink(Protocol):
    """Protocol for output sinks."""

    @abstractmethod
    def open(self) -> None:
        """Create the parent directory and open the primary output file.

        Raises:
            DirectoryCreationError: If the directory cannot be created.
            OutputFileError: If the file cannot be opened.
        """
        ...

    @abstractmethod
    def begin_block(self, columns: Sequence[ColumnVector]) -> None:
        """Start consuming a block; columns follow the request's selector order."""
        ...

    @abstractmethod
    def write_row(self, row_index: int) -> None:
        """Emit the row at row_index of the current block."""
        ...

    @abstractmethod
    def request_rotation(self) -> None:
        """The current file is full; switch files before the next row."""
        ...

    @abstractmethod
    def end_block(self) -> None:
        """Finish the current block; the column vectors may be released."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Finalize the open file. Idempotent."""
        ...

    @property
    @abstractmethod
    def files(self) -> Sequence[Path]:
        """Paths of every file opened so far, in order."""
        ...
