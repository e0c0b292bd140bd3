"""Catalog view of a table: ordered column definitions."""

from __future__ import annotations

from dataclasses import dataclass, field

from table_export.domain.value_objects import DataType


@dataclass(frozen=True, slots=True)
class ColumnDef:
    """A catalog column.

    Attributes:
        column_id: Position of the column in the table (0-based)
        name: Column name as written in output headers and JSON keys
        data_type: Logical type of the column
    """

    column_id: int
    name: str
    data_type: DataType


@dataclass(frozen=True)
class TableDef:
    """Ordered column definitions of one table."""

    schema_name: str
    table_name: str
    columns: tuple[ColumnDef, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        for position, column in enumerate(self.columns):
            if column.column_id != position:
                raise ValueError(
                    f"column {column.name!r} has id {column.column_id}, expected {position}"
                )

    def __len__(self) -> int:
        return len(self.columns)

    def column(self, column_id: int) -> ColumnDef:
        """Look up a column by index.

        Raises:
            IndexError: If the index is outside the column list.
        """
        if not 0 <= column_id < len(self.columns):
            raise IndexError(f"column index {column_id} out of range for {self.table_name}")
        return self.columns[column_id]
