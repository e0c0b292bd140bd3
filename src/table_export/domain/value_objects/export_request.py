"""Export request descriptor.

Resolved by the binder/planner before the scan starts and immutable for
the duration of the export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from table_export.domain.value_objects.column_selector import ColumnSelector


def part_path(path: Path, part: int) -> Path:
    """Path of the N-th output file; part 0 is the path itself."""
    return path if part == 0 else Path(f"{path}.part{part}")


class CopyFileType(Enum):
    """Supported export encodings."""

    CSV = "csv"
    JSONL = "jsonl"
    FVECS = "fvecs"
    PARQUET = "parquet"


@dataclass(frozen=True)
class ExportRequest:
    """Immutable export configuration.

    Attributes:
        file_path: Target path; split output goes to "{file_path}.part{N}"
        file_type: Output encoding
        columns: Ordered selectors; empty means every catalog column
        delimiter: CSV field delimiter
        header: Whether CSV output starts with a line of column names
        offset: Visible rows to skip before emitting
        limit: Maximum rows to emit (0 = unbounded)
        row_limit: Maximum rows per output file (0 = never split)
        schema_name: Database name, for logging
        table_name: Table name, for logging
    """

    file_path: Path
    file_type: CopyFileType
    columns: tuple[ColumnSelector, ...] = field(default_factory=tuple)
    delimiter: str = ","
    header: bool = False
    offset: int = 0
    limit: int = 0
    row_limit: int = 0
    schema_name: str = "default_db"
    table_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_path", Path(self.file_path))
        object.__setattr__(self, "columns", tuple(self.columns))
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        for name in ("offset", "limit", "row_limit"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    def part_path(self, part: int) -> Path:
        """Path of the N-th split file; part 0 is the original path."""
        return part_path(self.file_path, part)
