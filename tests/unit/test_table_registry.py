"""Unit tests for TableRegistry and its lock discipline."""

from __future__ import annotations

import threading

import pytest

from tabledb.domain.entities import Table
from tabledb.domain.errors import (
    InvalidIdentifierError,
    TableAlreadyExistsError,
    TableNotFoundError,
)
from tabledb.domain.services import TableRegistry


@pytest.fixture
def registry() -> TableRegistry:
    return TableRegistry("testdb")


@pytest.mark.unit
class TestTableRegistry:
    """Tests for table creation and lookup."""

    def test_create_and_get(self, registry: TableRegistry) -> None:
        created = registry.create_table("users", ["id", "name"])

        assert registry.get_table("users") is created
        assert created.columns == ("id", "name")
        assert len(created) == 0

    def test_name(self, registry: TableRegistry) -> None:
        assert registry.name == "testdb"

    def test_duplicate_table(self, registry: TableRegistry) -> None:
        first = registry.create_table("users", ["id"])
        first.append({"id": "1"})

        with pytest.raises(TableAlreadyExistsError) as exc_info:
            registry.create_table("users", ["other"])

        assert exc_info.value.table == "users"
        assert registry.get_table("users") is first
        assert len(first) == 1

    def test_identifiers_checked_before_existence(self, registry: TableRegistry) -> None:
        registry.create_table("users", ["id"])

        with pytest.raises(InvalidIdentifierError):
            registry.create_table("users", ["bad column"])

    def test_get_missing(self, registry: TableRegistry) -> None:
        with pytest.raises(TableNotFoundError) as exc_info:
            registry.get_table("ghosts")

        assert exc_info.value.table == "ghosts"

    def test_table_names_in_creation_order(self, registry: TableRegistry) -> None:
        for name in ("b", "a", "c"):
            registry.create_table(name, ["x"])

        assert registry.table_names() == ["b", "a", "c"]
        assert len(registry) == 3
        assert "a" in registry
        assert "z" not in registry

    def test_register_existing_value(self, registry: TableRegistry) -> None:
        table = Table.create("loaded", ["id"])

        registry.register(table)

        assert registry.get_table("loaded") is table
        with pytest.raises(TableAlreadyExistsError):
            registry.register(Table.create("loaded", ["id"]))


@pytest.mark.unit
class TestTableRegistryLocking:
    """Tests for the database-then-table lock order."""

    def test_acquire_table_holds_both_locks(self, registry: TableRegistry) -> None:
        table = registry.create_table("users", ["id"])

        with registry.acquire_table("users") as locked:
            assert locked is table
            assert registry._lock.locked()
            assert table.lock.locked()

        assert not registry._lock.locked()
        assert not table.lock.locked()

    def test_locks_released_when_block_raises(self, registry: TableRegistry) -> None:
        table = registry.create_table("users", ["id"])

        with pytest.raises(RuntimeError):
            with registry.acquire_table("users"):
                raise RuntimeError("boom")

        assert not registry._lock.locked()
        assert not table.lock.locked()

    def test_lock_released_when_table_missing(self, registry: TableRegistry) -> None:
        with pytest.raises(TableNotFoundError):
            with registry.acquire_table("ghosts"):
                pass

        assert not registry._lock.locked()

    def test_acquire_all_blocks_creation(self, registry: TableRegistry) -> None:
        registry.create_table("users", ["id"])
        created = threading.Event()

        def create() -> None:
            registry.create_table("orders", ["id"])
            created.set()

        with registry.acquire_all() as tables:
            assert [t.name for t in tables] == ["users"]
            worker = threading.Thread(target=create)
            worker.start()
            assert not created.wait(timeout=0.1)

        worker.join(timeout=5)
        assert created.is_set()
        assert registry.table_names() == ["users", "orders"]
