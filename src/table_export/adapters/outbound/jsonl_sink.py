"""Line-delimited JSON (JSONL) export sink.

One JSON object per line. Each selected column becomes an attribute named
after the catalog column or the virtual column (_row_id,
_create_timestamp, _delete_timestamp).

NaN and infinite floats have no JSON form and abort the export.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence, TextIO

from table_export.adapters.outbound.file_sink import FileSink
from table_export.domain.errors import OutputFileError, UnsupportedExportError


class JSONLSink(FileSink):
    """Writes rows as JSON objects, one per line."""

    def __init__(
        self,
        path: str | Path,
        column_names: Sequence[str],
        create_parent_dirs: bool = True,
    ) -> None:
        super().__init__(path, create_parent_dirs)
        self._column_names = list(column_names)
        self._handle: TextIO | None = None

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
        record: dict[str, Any] = {}
        for name, column in zip(self._column_names, self._columns):
            column.get_value(row_index).append_to_json(name, record)
        try:
            line = json.dumps(record, ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            raise UnsupportedExportError(f"Row is not representable as JSON: {e}") from e
        try:
            self._handle.write(line + "\n")
        except OSError as e:
            raise OutputFileError(f"Write to {self._files[-1]} failed: {e}") from e
