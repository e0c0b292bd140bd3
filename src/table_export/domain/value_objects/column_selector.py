"""Column selectors: which column of a block an export reads.

A selector is either a physical catalog column or one of the three
virtual columns synthesized by the storage layer. Virtual selectors never
carry a catalog index, so they can never be used to index the column list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from table_export.domain.value_objects.identifiers import (
    COLUMN_IDENTIFIER_CREATE,
    COLUMN_IDENTIFIER_DELETE,
    COLUMN_IDENTIFIER_ROW_ID,
)


class SelectorKind(Enum):
    """Kind of column a selector refers to."""

    PHYSICAL = "physical"
    ROW_ID = "_row_id"
    CREATE_TIMESTAMP = "_create_timestamp"
    DELETE_TIMESTAMP = "_delete_timestamp"


_SENTINELS = {
    COLUMN_IDENTIFIER_ROW_ID: SelectorKind.ROW_ID,
    COLUMN_IDENTIFIER_CREATE: SelectorKind.CREATE_TIMESTAMP,
    COLUMN_IDENTIFIER_DELETE: SelectorKind.DELETE_TIMESTAMP,
}


@dataclass(frozen=True, slots=True)
class ColumnSelector:
    """Selects one output column.

    Example:
        >>> ColumnSelector.physical(2).column_id
        2
        >>> ColumnSelector.row_id().virtual_name
        '_row_id'
    """

    kind: SelectorKind
    column_id: int | None = None

    def __post_init__(self) -> None:
        if self.kind is SelectorKind.PHYSICAL:
            if self.column_id is None or self.column_id < 0:
                raise ValueError(f"physical selector needs a column index, got {self.column_id}")
        elif self.column_id is not None:
            raise ValueError(f"virtual selector {self.kind.name} cannot carry a column index")

    @classmethod
    def physical(cls, column_id: int) -> ColumnSelector:
        return cls(SelectorKind.PHYSICAL, column_id)

    @classmethod
    def row_id(cls) -> ColumnSelector:
        return cls(SelectorKind.ROW_ID)

    @classmethod
    def create_timestamp(cls) -> ColumnSelector:
        return cls(SelectorKind.CREATE_TIMESTAMP)

    @classmethod
    def delete_timestamp(cls) -> ColumnSelector:
        return cls(SelectorKind.DELETE_TIMESTAMP)

    @classmethod
    def from_column_id(cls, column_id: int) -> ColumnSelector:
        """Map a raw column id (possibly a virtual-column sentinel) to a selector."""
        kind = _SENTINELS.get(column_id)
        if kind is not None:
            return cls(kind)
        return cls.physical(column_id)

    @property
    def is_virtual(self) -> bool:
        return self.kind is not SelectorKind.PHYSICAL

    @property
    def virtual_name(self) -> str:
        """Output name of a virtual column."""
        if not self.is_virtual:
            raise ValueError("physical selectors are named by the catalog")
        return self.kind.value
