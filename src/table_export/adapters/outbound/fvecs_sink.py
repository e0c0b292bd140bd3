"""Raw float vector (FVECS) export sink.

Each row is one record:

    [int32 dimension][dimension x float32]

little-endian, with no file header or trailer. Only a single float32
embedding column can be exported this way; the caller validates that
before the sink is built.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO

from table_export.adapters.outbound.file_sink import FileSink
from table_export.domain.errors import OutputFileError, VectorShapeError

DIMENSION_FORMAT = "<i"
ELEMENT_SIZE = 4


class FVECSSink(FileSink):
    """Writes a single embedding column as FVECS records."""

    def __init__(
        self,
        path: str | Path,
        dimension: int,
        create_parent_dirs: bool = True,
    ) -> None:
        super().__init__(path, create_parent_dirs)
        self._dimension = dimension
        self._prefix = struct.pack(DIMENSION_FORMAT, dimension)
        self._handle: BinaryIO | None = None

    @property
    def record_size(self) -> int:
        return len(self._prefix) + self._dimension * ELEMENT_SIZE

    def _open_file(self, path: Path) -> None:
        try:
            self._handle = open(path, "wb")
        except OSError as e:
            raise OutputFileError(f"Cannot open {path} for writing: {e}") from e

    def _close_file(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def _write_row(self, row_index: int) -> None:
        payload = self._columns[0].get_value(row_index).embedding_bytes("<")
        if len(payload) != self._dimension * ELEMENT_SIZE:
            raise VectorShapeError(
                f"embedding has {len(payload)} bytes, expected "
                f"{self._dimension * ELEMENT_SIZE}"
            )
        try:
            self._handle.write(self._prefix)
            self._handle.write(payload)
        except OSError as e:
            raise OutputFileError(f"Write to {self._files[-1]} failed: {e}") from e
