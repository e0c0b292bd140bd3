"""Seeded randomized property checks of the export engine."""

from __future__ import annotations

import math
import random
from pathlib import Path
from typing import Callable

import pytest

from table_export.adapters.outbound import InMemoryTableStorage, SnapshotTransaction
from table_export.application import ExportOperator
from table_export.domain.entities import TableDef
from table_export.domain.value_objects import CopyFileType, ExportRequest, TxnTimestamp

OperatorFactory = Callable[[InMemoryTableStorage], ExportOperator]

SEEDS = range(20)


def random_table(
    rng: random.Random, table: TableDef, max_rows: int = 40
) -> tuple[InMemoryTableStorage, dict[int, tuple[int, int | None]]]:
    """Rows with random create/delete timestamps.

    Returns the storage and, per row id value, (create_ts, delete_ts or None).
    """
    storage = InMemoryTableStorage(table, block_capacity=4, blocks_per_segment=2)
    history: dict[int, tuple[int, int | None]] = {}
    for i in range(rng.randint(0, max_rows)):
        create_ts = rng.randint(1, 100)
        (rid,) = storage.append_rows([(i, f"n{i}")], TxnTimestamp(create_ts))
        delete_ts = None
        if rng.random() < 0.3:
            delete_ts = rng.randint(create_ts + 1, 120)
            storage.delete_row(rid, TxnTimestamp(delete_ts))
        history[i] = (create_ts, delete_ts)
    return storage, history


def exported_ids(files: tuple[Path, ...]) -> list[int]:
    ids = []
    for path in files:
        ids.extend(int(line.split(",")[0]) for line in path.read_text().splitlines())
    return ids


@pytest.mark.property
@pytest.mark.integration
class TestExportProperties:
    """Randomized checks over many seeds."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_visibility_membership(
        self,
        seed: int,
        temp_dir: Path,
        people_table: TableDef,
        make_operator: OperatorFactory,
    ) -> None:
        """Exactly the rows created at or before and not deleted by read_ts appear, in order."""
        rng = random.Random(seed)
        storage, history = random_table(rng, people_table)
        read_ts = rng.randint(0, 120)

        expected = [
            i
            for i, (created, deleted) in history.items()
            if created <= read_ts and (deleted is None or deleted > read_ts)
        ]
        result = make_operator(storage).export(
            ExportRequest(temp_dir / "out.csv", CopyFileType.CSV),
            people_table,
            storage.snapshot(),
            SnapshotTransaction(TxnTimestamp(read_ts)),
        )
        assert exported_ids(result.files) == expected
        assert result.row_count == len(expected)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_row_count_conservation(
        self,
        seed: int,
        temp_dir: Path,
        people_table: TableDef,
        make_operator: OperatorFactory,
    ) -> None:
        """Emitted rows = min(max(R - offset, 0), limit or R - offset)."""
        rng = random.Random(seed)
        storage, history = random_table(rng, people_table)
        txn = SnapshotTransaction(TxnTimestamp(200))
        visible = sum(1 for _, deleted in history.values() if deleted is None)
        offset = rng.randint(0, visible + 3)
        limit = rng.choice([0, rng.randint(1, visible + 3)])

        remaining = max(visible - offset, 0)
        expected = min(remaining, limit or remaining)
        result = make_operator(storage).export(
            ExportRequest(temp_dir / "out.csv", CopyFileType.CSV, offset=offset, limit=limit),
            people_table,
            storage.snapshot(),
            txn,
        )
        assert result.row_count == expected
        assert len(exported_ids(result.files)) == expected

    @pytest.mark.parametrize("seed", SEEDS)
    def test_splitting(
        self,
        seed: int,
        temp_dir: Path,
        people_table: TableDef,
        make_operator: OperatorFactory,
    ) -> None:
        """ceil(n/k) files; all but the last hold exactly k rows."""
        rng = random.Random(seed)
        n = rng.randint(1, 30)
        k = rng.randint(1, 8)
        storage = InMemoryTableStorage(people_table, block_capacity=4)
        storage.append_rows([(i, f"n{i}") for i in range(n)], TxnTimestamp(1))
        path = temp_dir / "out.csv"

        result = make_operator(storage).export(
            ExportRequest(path, CopyFileType.CSV, row_limit=k),
            people_table,
            storage.snapshot(),
            SnapshotTransaction(TxnTimestamp(10)),
        )
        assert len(result.files) == math.ceil(n / k)
        assert result.files[0] == path
        sizes = [len(f.read_text().splitlines()) for f in result.files]
        assert all(size == k for size in sizes[:-1])
        assert 0 < sizes[-1] <= k
        assert exported_ids(result.files) == list(range(n))

    @pytest.mark.parametrize("n", [0, 1, 17])
    def test_no_splitting_single_file(
        self,
        n: int,
        temp_dir: Path,
        people_table: TableDef,
        make_operator: OperatorFactory,
    ) -> None:
        storage = InMemoryTableStorage(people_table, block_capacity=4)
        storage.append_rows([(i, f"n{i}") for i in range(n)], TxnTimestamp(1))
        result = make_operator(storage).export(
            ExportRequest(temp_dir / "out.csv", CopyFileType.CSV, row_limit=0),
            people_table,
            storage.snapshot(),
            SnapshotTransaction(TxnTimestamp(10)),
        )
        assert len(result.files) == 1
        assert result.row_count == n

    @pytest.mark.parametrize("file_type", list(CopyFileType))
    def test_deterministic_output(
        self,
        file_type: CopyFileType,
        temp_dir: Path,
        people_table: TableDef,
        embedding_storage: InMemoryTableStorage,
        make_operator: OperatorFactory,
    ) -> None:
        """Re-running against an unchanged snapshot yields identical bytes."""
        storage = embedding_storage
        if file_type is not CopyFileType.FVECS:
            storage, _ = random_table(random.Random(7), people_table)
        snapshot = storage.snapshot()
        txn = SnapshotTransaction(TxnTimestamp(200))
        outputs = []
        for attempt in range(2):
            path = temp_dir / f"out{attempt}"
            make_operator(storage).export(
                ExportRequest(path, file_type), storage.table, snapshot, txn
            )
            outputs.append(path.read_bytes())
        assert outputs[0] == outputs[1]
