"""Fault taxonomy of the export engine.

Two classes of fault exist:

RecoverableExportError
    Configuration or environment problems. The export aborts cleanly,
    every output file is closed, and the caller may fix the request and
    re-issue it.

InternalConsistencyError
    Defects: storage returned inconsistent data, or a type that earlier
    validation should have rejected reached the engine. These are not user
    errors and are never retried.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for every export fault."""

    pass


class RecoverableExportError(ExportError):
    """Export aborted because of a configuration or environment problem."""

    pass


class DirectoryCreationError(RecoverableExportError):
    """Parent directory of the target path could not be created."""

    pass


class OutputFileError(RecoverableExportError):
    """An output file could not be opened or written."""

    pass


class ColumnarWriterError(RecoverableExportError):
    """The Parquet writer reported a failure (open, write or close)."""

    pass


class UnsupportedExportError(RecoverableExportError):
    """The requested column/encoding combination cannot be exported."""

    pass


class ExportCancelledError(RecoverableExportError):
    """The caller cancelled the export mid-scan."""

    pass


class InternalConsistencyError(ExportError):
    """A defect was detected; the export result cannot be trusted."""

    pass


class ColumnLengthMismatchError(InternalConsistencyError):
    """A materialized column vector disagrees with its block's row count."""

    pass


class UnsupportedLogicalTypeError(InternalConsistencyError):
    """A non-exportable logical type reached type lowering."""

    pass


class VectorShapeError(InternalConsistencyError):
    """A value's runtime shape disagrees with its declared vector type."""

    pass


class UnknownFileTypeError(InternalConsistencyError):
    """No sink exists for the requested encoding."""

    pass
