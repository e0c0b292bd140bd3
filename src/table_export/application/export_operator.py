"""Export Operator - entry point that runs one export end to end.

The operator binds the request against the catalog, picks the sink for
the requested encoding, and drives the scan:

    selectors = resolve(request.columns or every catalog column)
    sink      = SINKS[request.file_type](request, named output columns)
    with sink:
        rows = ScanDriver(snapshot, selectors, ...).run(sink)
    return ExportResult(rows, sink.files, "EXPORT {rows} Rows")

Every export runs inside a trace span and is counted in the metrics
registry. A fault is logged, counted, and re-raised unchanged; the sink's
context manager has already closed the open file by then.

Usage:
    operator = ExportOperator(storage, storage)
    result = operator.export(request, table, storage.snapshot(), txn)
    print(result.message)  # EXPORT 3 Rows
"""

from __future__ import annotations

import time
from typing import Callable, Sequence

from table_export.adapters.outbound import (
    CSVSink,
    FileSink,
    FVECSSink,
    JSONLSink,
    ParquetSink,
)
from table_export.domain.entities import TableDef, TableSnapshot
from table_export.domain.errors import (
    ExportError,
    UnknownFileTypeError,
    UnsupportedExportError,
)
from table_export.domain.services import ColumnMaterializer, ScanDriver, lower_type
from table_export.domain.value_objects import (
    ColumnSelector,
    CopyFileType,
    DataType,
    ElementType,
    ExportRequest,
    LogicalTypeTag,
    SelectorKind,
)
from table_export.infrastructure.config import Config, get_config
from table_export.infrastructure.logging import export_context, get_logger
from table_export.infrastructure.metrics import MetricsRegistry, get_metrics
from table_export.infrastructure.tracing import trace_span
from table_export.ports.inbound import ExportResult
from table_export.ports.outbound import (
    BlockStorage,
    ReadTransaction,
    VisibilityFilterFactory,
)

logger = get_logger(__name__)

NamedColumn = tuple[str, DataType]

_VIRTUAL_TYPES: dict[SelectorKind, DataType] = {
    SelectorKind.ROW_ID: DataType.scalar(LogicalTypeTag.ROW_ID),
    SelectorKind.CREATE_TIMESTAMP: DataType.scalar(LogicalTypeTag.BIGINT),
    SelectorKind.DELETE_TIMESTAMP: DataType.scalar(LogicalTypeTag.BIGINT),
}


class ExportOperator:
    """Runs exports of table snapshots to files.

    Implements the TableExporter port. One operator may run any number of
    exports, one at a time per call; it keeps no per-export state.
    """

    def __init__(
        self,
        storage: BlockStorage,
        visibility: VisibilityFilterFactory,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the operator.

        Args:
            storage: Paging layer port the columns are read through.
            visibility: Builds per-segment visibility filters.
            config: Engine configuration (defaults to get_config()).
            metrics: Metrics registry (defaults to get_metrics()).
        """
        self._config = config or get_config()
        self._metrics = metrics or get_metrics()
        self._materializer = ColumnMaterializer(
            storage, self._config.storage.block_capacity
        )
        self._visibility = visibility
        self._sink_factories: dict[
            CopyFileType, Callable[[ExportRequest, Sequence[NamedColumn]], FileSink]
        ] = {
            CopyFileType.CSV: self._csv_sink,
            CopyFileType.JSONL: self._jsonl_sink,
            CopyFileType.FVECS: self._fvecs_sink,
            CopyFileType.PARQUET: self._parquet_sink,
        }

    def export(
        self,
        request: ExportRequest,
        table: TableDef,
        snapshot: TableSnapshot,
        txn: ReadTransaction,
        should_cancel: Callable[[], bool] | None = None,
    ) -> ExportResult:
        """Export the snapshot to request.file_path.

        Raises:
            RecoverableExportError: Bad request or I/O failure.
            InternalConsistencyError: Storage or type invariant violated.
        """
        file_type = getattr(request.file_type, "value", str(request.file_type))
        start_time = time.perf_counter()

        with export_context(
            schema=request.schema_name,
            table=table.table_name,
            file_type=file_type,
            path=str(request.file_path),
        ), trace_span(
            "table_export.export",
            {"file_type": file_type, "table": table.table_name},
        ) as span:
            try:
                selectors = self._resolve_selectors(request, table)
                columns = self._output_columns(selectors, table)
                sink = self._make_sink(request, selectors, columns)
                driver = ScanDriver(
                    snapshot,
                    selectors,
                    self._materializer,
                    self._visibility,
                    txn.read_timestamp,
                    offset=request.offset,
                    limit=request.limit,
                    row_limit=request.row_limit,
                    should_cancel=should_cancel,
                )
                with sink:
                    row_count = driver.run(sink)
            except ExportError as e:
                self._metrics.exports_total.labels(file_type=file_type, status="error").inc()
                logger.error("Export failed", error_type=type(e).__name__, error=str(e))
                raise

            files = tuple(sink.files)
            span.set_attribute("rows", row_count)
            self._metrics.exports_total.labels(file_type=file_type, status="success").inc()
            self._metrics.rows_total.labels(file_type=file_type).inc(row_count)
            self._metrics.files_total.labels(file_type=file_type).inc(len(files))
            self._metrics.duration_seconds.labels(file_type=file_type).observe(
                time.perf_counter() - start_time
            )
            logger.info("Export completed", rows=row_count, files=len(files))

        return ExportResult(row_count, files, f"EXPORT {row_count} Rows")

    def _resolve_selectors(
        self, request: ExportRequest, table: TableDef
    ) -> tuple[ColumnSelector, ...]:
        if not request.columns:
            return tuple(ColumnSelector.physical(c.column_id) for c in table.columns)
        for selector in request.columns:
            if selector.kind is SelectorKind.PHYSICAL and selector.column_id >= len(table):
                raise UnsupportedExportError(
                    f"Column index {selector.column_id} out of range: "
                    f"{table.table_name} has {len(table)} columns"
                )
        return request.columns

    @staticmethod
    def _output_columns(
        selectors: Sequence[ColumnSelector], table: TableDef
    ) -> list[NamedColumn]:
        columns = []
        for selector in selectors:
            if selector.is_virtual:
                columns.append((selector.virtual_name, _VIRTUAL_TYPES[selector.kind]))
            else:
                column_def = table.column(selector.column_id)
                columns.append((column_def.name, column_def.data_type))
        return columns

    def _make_sink(
        self,
        request: ExportRequest,
        selectors: Sequence[ColumnSelector],
        columns: Sequence[NamedColumn],
    ) -> FileSink:
        factory = self._sink_factories.get(request.file_type)
        if factory is None:
            raise UnknownFileTypeError(f"Not supported file type: {request.file_type}")
        if request.file_type is CopyFileType.FVECS:
            self._check_fvecs(selectors, columns)
        elif request.file_type is CopyFileType.PARQUET:
            self._check_parquet(selectors)
        self._check_types(columns)
        return factory(request, columns)

    @staticmethod
    def _check_fvecs(
        selectors: Sequence[ColumnSelector], columns: Sequence[NamedColumn]
    ) -> None:
        if len(selectors) != 1 or selectors[0].is_virtual:
            raise UnsupportedExportError(
                f"Only one embedding column can be exported as fvecs, got {len(selectors)} columns"
            )
        name, data_type = columns[0]
        if data_type.tag is not LogicalTypeTag.EMBEDDING:
            raise UnsupportedExportError(
                f"Only embedding column can be exported as fvecs, {name} is {data_type}"
            )
        if data_type.embedding_info.element_type is not ElementType.FLOAT:
            raise UnsupportedExportError(
                f"Only float embedding column can be exported as fvecs, {name} is {data_type}"
            )

    @staticmethod
    def _check_types(columns: Sequence[NamedColumn]) -> None:
        # Row ids are rendered by the text sinks but have no Arrow type.
        for _, data_type in columns:
            if data_type.tag is not LogicalTypeTag.ROW_ID:
                lower_type(data_type)

    @staticmethod
    def _check_parquet(selectors: Sequence[ColumnSelector]) -> None:
        if any(s.kind is SelectorKind.ROW_ID for s in selectors):
            raise UnsupportedExportError("Row id column cannot be exported as parquet")

    def _csv_sink(self, request: ExportRequest, columns: Sequence[NamedColumn]) -> FileSink:
        return CSVSink(
            request.file_path,
            [name for name, _ in columns],
            delimiter=request.delimiter,
            header=request.header,
            create_parent_dirs=self._config.export.create_parent_dirs,
        )

    def _jsonl_sink(self, request: ExportRequest, columns: Sequence[NamedColumn]) -> FileSink:
        return JSONLSink(
            request.file_path,
            [name for name, _ in columns],
            create_parent_dirs=self._config.export.create_parent_dirs,
        )

    def _fvecs_sink(self, request: ExportRequest, columns: Sequence[NamedColumn]) -> FileSink:
        _, data_type = columns[0]
        return FVECSSink(
            request.file_path,
            data_type.embedding_info.dimension,
            create_parent_dirs=self._config.export.create_parent_dirs,
        )

    def _parquet_sink(self, request: ExportRequest, columns: Sequence[NamedColumn]) -> FileSink:
        return ParquetSink(
            request.file_path,
            columns,
            compression=self._config.export.parquet_compression,
            create_parent_dirs=self._config.export.create_parent_dirs,
        )
