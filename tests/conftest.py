"""Pytest configuration and fixtures for tabledb tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from tabledb.application import Database
from tabledb.infrastructure.config import Config, StorageConfig
from tabledb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration rooted in a temporary directory."""
    return Config(storage=StorageConfig(data_dir=temp_dir))


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def database(temp_dir: Path, metrics_registry: MetricsRegistry) -> Database:
    """Provide an empty database persisting under the temporary directory."""
    return Database("testdb", data_dir=temp_dir, metrics=metrics_registry)


@pytest.fixture
def users(database: Database) -> Database:
    """Database with a populated users(id, name, age) table."""
    database.create_table("users", ["id", "name", "age"])
    database.insert("users", {"id": "1", "name": "Alice", "age": "30"})
    database.insert("users", {"id": "2", "name": "Bob", "age": "25"})
    database.insert("users", {"id": "3", "name": "Carol", "age": "30"})
    return database


@pytest.fixture
def read_metric(metrics_registry: MetricsRegistry) -> Callable[..., float]:
    """Read a sample value from the test metrics registry, 0.0 if never set."""

    def read(name: str, **labels: str) -> float:
        value = metrics_registry._registry.get_sample_value(name, labels or None)
        return value or 0.0

    return read


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
