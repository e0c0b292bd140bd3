"""Parquet (columnar binary) export sink.

Rows are buffered per block and written as Arrow record batches. A batch
ends at the end of a block and whenever the per-file row budget is used
up, so every batch lands entirely in one file. Each output file has its
own ParquetWriter carrying the schema built by type lowering.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from table_export.adapters.outbound.file_sink import FileSink
from table_export.domain.errors import ColumnarWriterError
from table_export.domain.services import lower_schema, make_builder
from table_export.domain.value_objects import DataType


class ParquetSink(FileSink):
    """Writes rows as Parquet record batches."""

    def __init__(
        self,
        path: str | Path,
        columns: Sequence[tuple[str, DataType]],
        compression: str = "none",
        create_parent_dirs: bool = True,
    ) -> None:
        """Initialize the sink.

        Args:
            path: Target path.
            columns: (name, logical type) of each output column, in order.
            compression: Parquet compression codec.
            create_parent_dirs: Create the parent directory if missing.

        Raises:
            UnsupportedLogicalTypeError: If a column type cannot be lowered.
        """
        super().__init__(path, create_parent_dirs)
        self._column_types = [data_type for _, data_type in columns]
        self._schema = lower_schema(columns)
        self._compression = compression
        self._writer: pq.ParquetWriter | None = None
        self._pending_rows: list[int] = []
        self._batches_written = 0

    @property
    def schema(self) -> pa.Schema:
        return self._schema

    @property
    def batches_written(self) -> int:
        return self._batches_written

    def request_rotation(self) -> None:
        self._flush_batch()
        super().request_rotation()

    def end_block(self) -> None:
        self._flush_batch()
        super().end_block()

    def _write_row(self, row_index: int) -> None:
        self._pending_rows.append(row_index)

    def _flush_batch(self) -> None:
        if not self._pending_rows:
            return
        builders = []
        for data_type, column in zip(self._column_types, self._columns):
            builder = make_builder(data_type)
            for row_index in self._pending_rows:
                builder.append(column.get_value(row_index))
            builders.append(builder)
        self._pending_rows = []
        try:
            arrays = [builder.finish() for builder in builders]
            batch = pa.RecordBatch.from_arrays(arrays, schema=self._schema)
            self._writer.write_batch(batch)
        except (pa.ArrowException, OSError) as e:
            raise ColumnarWriterError(
                f"Failed to write record batch to parquet file: {e}"
            ) from e
        self._batches_written += 1

    def _open_file(self, path: Path) -> None:
        try:
            self._writer = pq.ParquetWriter(
                str(path), self._schema, compression=self._compression
            )
        except (pa.ArrowException, OSError) as e:
            raise ColumnarWriterError(f"Failed to open parquet file {path}: {e}") from e

    def _close_file(self) -> None:
        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        self._pending_rows = []
        try:
            writer.close()
        except (pa.ArrowException, OSError) as e:
            raise ColumnarWriterError(f"Failed to close parquet file: {e}") from e
