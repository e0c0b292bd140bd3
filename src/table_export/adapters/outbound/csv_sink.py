"""Delimited-text (CSV) export sink.

One line per row, fields joined by the configured delimiter. Vector,
tensor and sparse cells are wrapped in double quotes because their text
form contains commas. Other text is written as-is, without escaping;
existing consumers depend on that form.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, TextIO

from table_export.adapters.outbound.file_sink import FileSink
from table_export.domain.entities import Value
from table_export.domain.errors import ExportError, OutputFileError
from table_export.domain.value_objects import LogicalTypeTag


def render_cell(value: Value) -> str:
    """CSV text of one cell."""
    tag = value.data_type.tag
    text = value.to_string()
    if tag.is_vector_family() or tag is LogicalTypeTag.SPARSE:
        return f'"{text}"'
    return text


class CSVSink(FileSink):
    """Writes rows as delimited text lines."""

    def __init__(
        self,
        path: str | Path,
        column_names: Sequence[str],
        delimiter: str = ",",
        header: bool = False,
        create_parent_dirs: bool = True,
    ) -> None:
        """Initialize the sink.

        Args:
            path: Target path.
            column_names: Header names in output order.
            delimiter: Single-character field delimiter.
            header: Write a header line at the top of the first file.
            create_parent_dirs: Create the parent directory if missing.
        """
        super().__init__(path, create_parent_dirs)
        self._column_names = list(column_names)
        self._delimiter = delimiter
        self._header = header
        self._handle: TextIO | None = None

    def open(self) -> None:
        super().open()
        if self._header:
            # __exit__ never runs when __enter__ raises
            try:
                self._write(self._delimiter.join(self._column_names) + "\n")
            except ExportError:
                self.close()
                raise

    def _open_file(self, path: Path) -> None:
        try:
            self._handle = open(path, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise OutputFileError(f"Cannot open {path} for writing: {e}") from e

    def _close_file(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def _write_row(self, row_index: int) -> None:
        cells = (render_cell(column.get_value(row_index)) for column in self._columns)
        self._write(self._delimiter.join(cells) + "\n")

    def _write(self, text: str) -> None:
        try:
            self._handle.write(text)
        except OSError as e:
            raise OutputFileError(f"Write to {self._files[-1]} failed: {e}") from e
