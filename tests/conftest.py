"""Pytest configuration and fixtures for table_export tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import numpy as np
import pytest
from prometheus_client import CollectorRegistry

from table_export.adapters.outbound import InMemoryTableStorage, SnapshotTransaction
from table_export.application import ExportOperator
from table_export.domain.entities import ColumnDef, TableDef
from table_export.domain.value_objects import (
    DataType,
    ElementType,
    LogicalTypeTag,
    TxnTimestamp,
)
from table_export.infrastructure.config import Config, StorageConfig
from table_export.infrastructure.metrics import MetricsRegistry

BLOCK_CAPACITY = 4


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration with small blocks."""
    return Config(storage=StorageConfig(block_capacity=BLOCK_CAPACITY))


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def people_table() -> TableDef:
    """Table t(id INTEGER, name VARCHAR)."""
    return TableDef(
        "default_db",
        "t",
        (
            ColumnDef(0, "id", DataType.scalar(LogicalTypeTag.INTEGER)),
            ColumnDef(1, "name", DataType.scalar(LogicalTypeTag.VARCHAR)),
        ),
    )


@pytest.fixture
def people_storage(people_table: TableDef) -> InMemoryTableStorage:
    """Storage holding (1, a), (2, b), (3, c) committed at ts 10."""
    storage = InMemoryTableStorage(people_table, block_capacity=BLOCK_CAPACITY)
    storage.append_rows([(1, "a"), (2, "b"), (3, "c")], TxnTimestamp(10))
    return storage


@pytest.fixture
def embedding_table() -> TableDef:
    """Table v(e EMBEDDING(FLOAT, 2))."""
    return TableDef(
        "default_db",
        "v",
        (ColumnDef(0, "e", DataType.embedding(ElementType.FLOAT, 2)),),
    )


@pytest.fixture
def embedding_storage(embedding_table: TableDef) -> InMemoryTableStorage:
    """Storage holding [1.0, 2.0] and [3.0, 4.0] committed at ts 10."""
    storage = InMemoryTableStorage(embedding_table, block_capacity=BLOCK_CAPACITY)
    storage.append_rows(
        [
            (np.array([1.0, 2.0], dtype=np.float32),),
            (np.array([3.0, 4.0], dtype=np.float32),),
        ],
        TxnTimestamp(10),
    )
    return storage


@pytest.fixture
def txn() -> SnapshotTransaction:
    """Read transaction that sees everything committed up to ts 100."""
    return SnapshotTransaction(TxnTimestamp(100))


@pytest.fixture
def make_operator(
    test_config: Config, metrics_registry: MetricsRegistry
) -> Callable[[InMemoryTableStorage], ExportOperator]:
    """Factory for an operator over a storage, with test config and metrics."""

    def factory(storage: InMemoryTableStorage) -> ExportOperator:
        return ExportOperator(storage, storage, config=test_config, metrics=metrics_registry)

    return factory


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "property: Property-based tests")
