"""Base class for file-backed export sinks.

Handles what every encoding shares:

- creating the parent directory of the target path
- opening the primary file and the "{path}.part{N}" split files
- deferred rotation: request_rotation() only sets a flag, and the switch
  happens when the next row is written, so an export whose last row
  exactly fills a file never leaves an empty trailing part
- closing the current file on every exit path (context manager)

Subclasses implement the encoding: _open_file, _close_file and _write_row.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import Sequence

from table_export.domain.entities import ColumnVector
from table_export.domain.errors import DirectoryCreationError, ExportError
from table_export.domain.value_objects import part_path
from table_export.infrastructure.logging import get_logger

logger = get_logger(__name__)


class FileSink(ABC):
    """Common file lifecycle of the CSV, JSONL, FVECS and Parquet sinks."""

    def __init__(self, path: str | Path, create_parent_dirs: bool = True) -> None:
        """Initialize the sink.

        Args:
            path: Target path of the first output file.
            create_parent_dirs: Create the parent directory if missing.
        """
        self._path = Path(path)
        self._create_parent_dirs = create_parent_dirs
        self._file_no = 0
        self._switch_pending = False
        self._files: list[Path] = []
        self._columns: Sequence[ColumnVector] = ()
        self._is_open = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def files(self) -> Sequence[Path]:
        return tuple(self._files)

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        if self._create_parent_dirs:
            self._ensure_parent_dir()
        self._open_file(self._path)
        self._is_open = True
        self._files.append(self._path)

    def begin_block(self, columns: Sequence[ColumnVector]) -> None:
        self._columns = columns

    def write_row(self, row_index: int) -> None:
        if self._switch_pending:
            self._switch_to_next_file()
        self._write_row(row_index)

    def request_rotation(self) -> None:
        self._switch_pending = True

    def end_block(self) -> None:
        self._columns = ()

    def close(self) -> None:
        if not self._is_open:
            return
        self._is_open = False
        self._close_file()

    def __enter__(self) -> FileSink:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
            return
        # Best-effort finalize; the in-flight exception wins.
        try:
            self.close()
        except (OSError, ExportError) as e:
            logger.warning(
                "Failed to finalize export file", file=str(self._files[-1]), error=str(e)
            )

    def _ensure_parent_dir(self) -> None:
        parent = self._path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(f"Cannot create directory {parent}: {e}") from e

    def _switch_to_next_file(self) -> None:
        self._is_open = False
        self._close_file()
        self._file_no += 1
        next_path = part_path(self._path, self._file_no)
        logger.debug("Switch to new export file", file=str(next_path), part=self._file_no)
        self._open_file(next_path)
        self._is_open = True
        self._files.append(next_path)
        self._switch_pending = False

    @abstractmethod
    def _open_file(self, path: Path) -> None:
        """Open path for writing; raise a RecoverableExportError on failure."""
        ...

    @abstractmethod
    def _close_file(self) -> None:
        """Flush and close the current file."""
        ...

    @abstractmethod
    def _write_row(self, row_index: int) -> None:
        """Encode and write one row of the current block."""
        ...
