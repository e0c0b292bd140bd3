"""Unit tests for identifiers, column selectors and the export request."""

from __future__ import annotations

from pathlib import Path

import pytest

from table_export.domain.value_objects import (
    COLUMN_IDENTIFIER_CREATE,
    COLUMN_IDENTIFIER_DELETE,
    COLUMN_IDENTIFIER_ROW_ID,
    ColumnSelector,
    CopyFileType,
    ExportRequest,
    RowId,
    SegmentId,
    SegmentOffset,
    SelectorKind,
    part_path,
)


@pytest.mark.unit
class TestRowId:
    """Tests for RowId."""

    def test_text_form(self) -> None:
        """Row ids render as segment:offset."""
        assert str(RowId(SegmentId(3), SegmentOffset(7))) == "3:7"

    def test_packing(self) -> None:
        """Segment id occupies the high 32 bits."""
        rid = RowId(SegmentId(2), SegmentOffset(10))
        assert rid.to_int() == (2 << 32) | 10
        assert RowId.from_int(rid.to_int()) == rid

    def test_ordering(self) -> None:
        """Row ids order by segment, then offset."""
        ids = [
            RowId(SegmentId(1), SegmentOffset(0)),
            RowId(SegmentId(0), SegmentOffset(5)),
            RowId(SegmentId(0), SegmentOffset(1)),
        ]
        assert [str(r) for r in sorted(ids)] == ["0:1", "0:5", "1:0"]

    def test_out_of_range(self) -> None:
        """Components must fit in 32 bits."""
        with pytest.raises(ValueError):
            RowId(SegmentId(-1), SegmentOffset(0))
        with pytest.raises(ValueError):
            RowId(SegmentId(0), SegmentOffset(1 << 32))


@pytest.mark.unit
class TestColumnSelector:
    """Tests for ColumnSelector."""

    def test_physical(self) -> None:
        selector = ColumnSelector.physical(2)
        assert selector.kind is SelectorKind.PHYSICAL
        assert selector.column_id == 2
        assert not selector.is_virtual

    def test_physical_requires_index(self) -> None:
        with pytest.raises(ValueError):
            ColumnSelector(SelectorKind.PHYSICAL)
        with pytest.raises(ValueError):
            ColumnSelector.physical(-1)

    def test_virtual_cannot_carry_index(self) -> None:
        with pytest.raises(ValueError):
            ColumnSelector(SelectorKind.ROW_ID, 0)

    def test_virtual_names(self) -> None:
        assert ColumnSelector.row_id().virtual_name == "_row_id"
        assert ColumnSelector.create_timestamp().virtual_name == "_create_timestamp"
        assert ColumnSelector.delete_timestamp().virtual_name == "_delete_timestamp"

    def test_physical_has_no_virtual_name(self) -> None:
        with pytest.raises(ValueError):
            ColumnSelector.physical(0).virtual_name

    @pytest.mark.parametrize(
        "column_id,kind",
        [
            (COLUMN_IDENTIFIER_ROW_ID, SelectorKind.ROW_ID),
            (COLUMN_IDENTIFIER_CREATE, SelectorKind.CREATE_TIMESTAMP),
            (COLUMN_IDENTIFIER_DELETE, SelectorKind.DELETE_TIMESTAMP),
            (0, SelectorKind.PHYSICAL),
            (5, SelectorKind.PHYSICAL),
        ],
    )
    def test_from_column_id(self, column_id: int, kind: SelectorKind) -> None:
        """Sentinel ids map to virtual selectors, others to physical ones."""
        selector = ColumnSelector.from_column_id(column_id)
        assert selector.kind is kind
        if kind is SelectorKind.PHYSICAL:
            assert selector.column_id == column_id
        else:
            assert selector.column_id is None


@pytest.mark.unit
class TestExportRequest:
    """Tests for ExportRequest."""

    def test_defaults(self) -> None:
        request = ExportRequest("/tmp/out.csv", CopyFileType.CSV)
        assert request.file_path == Path("/tmp/out.csv")
        assert request.columns == ()
        assert request.delimiter == ","
        assert request.header is False
        assert (request.offset, request.limit, request.row_limit) == (0, 0, 0)

    def test_columns_become_tuple(self) -> None:
        request = ExportRequest(
            "/tmp/out.csv", CopyFileType.CSV, columns=[ColumnSelector.physical(0)]
        )
        assert request.columns == (ColumnSelector.physical(0),)

    def test_delimiter_must_be_single_character(self) -> None:
        with pytest.raises(ValueError):
            ExportRequest("/tmp/out.csv", CopyFileType.CSV, delimiter=";;")
        with pytest.raises(ValueError):
            ExportRequest("/tmp/out.csv", CopyFileType.CSV, delimiter="")

    @pytest.mark.parametrize("field", ["offset", "limit", "row_limit"])
    def test_counts_non_negative(self, field: str) -> None:
        with pytest.raises(ValueError):
            ExportRequest("/tmp/out.csv", CopyFileType.CSV, **{field: -1})

    def test_part_paths(self) -> None:
        """Part 0 is the path itself; later parts get a .partN suffix."""
        request = ExportRequest("/tmp/out.csv", CopyFileType.CSV)
        assert request.part_path(0) == Path("/tmp/out.csv")
        assert request.part_path(1) == Path("/tmp/out.csv.part1")
        assert part_path(Path("/tmp/x"), 12) == Path("/tmp/x.part12")
