"""Unit tests for the CRUD engine."""

from __future__ import annotations

from typing import Callable

import pytest

from tabledb.application.crud_engine import CrudEngine, as_predicate
from tabledb.domain.errors import (
    ColumnCountMismatchError,
    InvalidIdentifierError,
    TableAlreadyExistsError,
    TableNotFoundError,
    UnknownColumnError,
)
from tabledb.domain.services import TableRegistry
from tabledb.domain.value_objects import Predicate
from tabledb.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def engine(metrics_registry: MetricsRegistry) -> CrudEngine:
    engine = CrudEngine(TableRegistry("testdb"), metrics=metrics_registry)
    engine.create_table("users", ["id", "name", "age"])
    engine.insert("users", {"id": "1", "name": "Alice", "age": "30"})
    engine.insert("users", {"id": "2", "name": "Bob", "age": "25"})
    engine.insert("users", {"id": "3", "name": "Carol", "age": "30"})
    return engine


def rows_of(engine: CrudEngine) -> list[dict[str, str]]:
    return engine.search("users")


@pytest.mark.unit
class TestAsPredicate:
    """Tests for condition coercion."""

    def test_none_is_empty(self) -> None:
        assert as_predicate(None) == Predicate()

    def test_mapping(self) -> None:
        assert as_predicate({"id": "1"}) == Predicate.where(id="1")

    def test_predicate_passthrough(self) -> None:
        predicate = Predicate.where(id="1")
        assert as_predicate(predicate) is predicate


@pytest.mark.unit
class TestCreateTable:
    """Tests for create_table."""

    def test_invalid_name(self, engine: CrudEngine) -> None:
        with pytest.raises(InvalidIdentifierError):
            engine.create_table("bad-name", ["id"])

    def test_duplicate(self, engine: CrudEngine) -> None:
        with pytest.raises(TableAlreadyExistsError):
            engine.create_table("users", ["id"])

        assert engine.row_count("users") == 3

    def test_updates_tables_gauge(self, engine: CrudEngine, read_metric: Callable[..., float]) -> None:
        engine.create_table("orders", ["id"])

        assert read_metric("tabledb_tables", database="testdb") == 2


@pytest.mark.unit
class TestInsert:
    """Tests for insert and insert_values."""

    def test_insert_appends(self, engine: CrudEngine) -> None:
        stored = engine.insert("users", {"id": "4", "name": "Dan", "age": "41"})

        assert stored == {"id": "4", "name": "Dan", "age": "41"}
        assert rows_of(engine)[-1] == stored

    def test_insert_subset(self, engine: CrudEngine) -> None:
        engine.insert("users", {"name": "Eve"})

        assert rows_of(engine)[-1] == {"id": "", "name": "Eve", "age": ""}

    def test_insert_duplicates_allowed(self, engine: CrudEngine) -> None:
        engine.insert("users", {"id": "1", "name": "Alice", "age": "30"})

        assert len(engine.search("users", {"id": "1"})) == 2

    def test_unknown_column_leaves_rows_unchanged(self, engine: CrudEngine) -> None:
        with pytest.raises(UnknownColumnError) as exc_info:
            engine.insert("users", {"id": "4", "email": "dan@example.com"})

        assert exc_info.value.column == "email"
        assert engine.row_count("users") == 3

    def test_missing_table(self, engine: CrudEngine) -> None:
        with pytest.raises(TableNotFoundError):
            engine.insert("ghosts", {"id": "1"})

    def test_insert_values(self, engine: CrudEngine) -> None:
        engine.insert_values("users", ["4", "Dan", "41"])

        assert rows_of(engine)[-1] == {"id": "4", "name": "Dan", "age": "41"}

    def test_insert_values_count_mismatch(self, engine: CrudEngine) -> None:
        with pytest.raises(ColumnCountMismatchError):
            engine.insert_values("users", ["4", "Dan"])

        assert engine.row_count("users") == 3

    def test_stored_row_is_a_copy(self, engine: CrudEngine) -> None:
        stored = engine.insert("users", {"id": "4"})
        stored["id"] = "changed"

        assert rows_of(engine)[-1]["id"] == "4"


@pytest.mark.unit
class TestDelete:
    """Tests for delete."""

    def test_delete_matching(self, engine: CrudEngine) -> None:
        assert engine.delete("users", {"age": "30"}) == 2
        assert rows_of(engine) == [{"id": "2", "name": "Bob", "age": "25"}]

    def test_delete_preserves_survivor_order(self, engine: CrudEngine) -> None:
        engine.insert("users", {"id": "4", "name": "Dan", "age": "41"})

        engine.delete("users", {"id": "2"})

        assert [row["id"] for row in rows_of(engine)] == ["1", "3", "4"]

    def test_delete_is_idempotent(self, engine: CrudEngine) -> None:
        assert engine.delete("users", {"name": "Bob"}) == 1
        assert engine.delete("users", {"name": "Bob"}) == 0
        assert engine.row_count("users") == 2

    def test_conjunction(self, engine: CrudEngine) -> None:
        assert engine.delete("users", {"age": "30", "name": "Carol"}) == 1
        assert [row["id"] for row in rows_of(engine)] == ["1", "2"]

    def test_no_match_is_not_an_error(self, engine: CrudEngine) -> None:
        assert engine.delete("users", {"name": "Nobody"}) == 0
        assert engine.row_count("users") == 3

    def test_empty_conditions_delete_all(self, engine: CrudEngine) -> None:
        assert engine.delete("users", {}) == 3
        assert engine.row_count("users") == 0

    def test_undeclared_condition_column_matches_nothing(self, engine: CrudEngine) -> None:
        assert engine.delete("users", {"email": "x"}) == 0
        assert engine.delete("users", {"email": "", "age": "30"}) == 0
        assert engine.row_count("users") == 3

    def test_missing_table(self, engine: CrudEngine) -> None:
        with pytest.raises(TableNotFoundError):
            engine.delete("ghosts", {"id": "1"})


@pytest.mark.unit
class TestUpdate:
    """Tests for update."""

    def test_update_scopes_fields_and_rows(self, engine: CrudEngine) -> None:
        before = rows_of(engine)

        assert engine.update("users", {"name": "Bob"}, {"age": "26"}) == 1

        after = rows_of(engine)
        assert after[1] == {"id": "2", "name": "Bob", "age": "26"}
        assert after[0] == before[0]
        assert after[2] == before[2]

    def test_update_many(self, engine: CrudEngine) -> None:
        assert engine.update("users", Predicate.where(age="30"), {"age": "31"}) == 2
        assert [row["age"] for row in rows_of(engine)] == ["31", "25", "31"]

    def test_unknown_value_column(self, engine: CrudEngine) -> None:
        before = rows_of(engine)

        with pytest.raises(UnknownColumnError) as exc_info:
            engine.update("users", {"name": "Bob"}, {"age": "26", "email": "b@example.com"})

        assert exc_info.value.column == "email"
        assert rows_of(engine) == before

    def test_undeclared_condition_column_matches_nothing(self, engine: CrudEngine) -> None:
        before = rows_of(engine)

        assert engine.update("users", {"email": "x"}, {"age": "1"}) == 0
        assert rows_of(engine) == before

    def test_empty_conditions_update_all(self, engine: CrudEngine) -> None:
        assert engine.update("users", None, {"age": "0"}) == 3
        assert {row["age"] for row in rows_of(engine)} == {"0"}

    def test_no_match(self, engine: CrudEngine) -> None:
        assert engine.update("users", {"name": "Nobody"}, {"age": "1"}) == 0


@pytest.mark.unit
class TestSearch:
    """Tests for search."""

    def test_search_in_order(self, engine: CrudEngine) -> None:
        rows = engine.search("users", {"age": "30"})

        assert [row["name"] for row in rows] == ["Alice", "Carol"]

    def test_search_exact_match(self, engine: CrudEngine) -> None:
        assert engine.search("users", {"name": "alice"}) == []

    def test_undeclared_condition_column_matches_nothing(self, engine: CrudEngine) -> None:
        assert engine.search("users", {"email": ""}) == []

    def test_search_does_not_mutate(self, engine: CrudEngine) -> None:
        engine.search("users", {"id": "1"})[0]["name"] = "Mallory"

        assert engine.search("users", {"id": "1"})[0]["name"] == "Alice"

    def test_columns(self, engine: CrudEngine) -> None:
        assert engine.columns("users") == ["id", "name", "age"]


@pytest.mark.unit
class TestEngineMetrics:
    """Tests for operation metrics."""

    def test_operation_counters(self, engine: CrudEngine, read_metric: Callable[..., float]) -> None:
        with pytest.raises(TableNotFoundError):
            engine.search("ghosts")

        assert read_metric("tabledb_operations_total", operation="insert", status="ok") == 3
        assert read_metric("tabledb_operations_total", operation="search", status="error") == 1
        assert read_metric("tabledb_rows_affected_total", operation="insert") == 3

    def test_lock_wait_observed(self, engine: CrudEngine, read_metric: Callable[..., float]) -> None:
        assert read_metric("tabledb_lock_wait_seconds_count") >= 3
