"""CRUD Engine - create, insert, delete, update and search over a registry.

Every table-touching operation runs inside TableRegistry.acquire_table(),
which takes the database lock and then the table lock and releases them
in reverse order on every exit path. All validation happens with the
locks held but before the row list is touched, so a failed call never
leaves a partial write behind.

Lookups are full linear scans; there are no indexes.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator, Mapping, Sequence

from tabledb.domain.entities import Row, Table
from tabledb.domain.services import TableRegistry
from tabledb.domain.value_objects import Predicate
from tabledb.infrastructure.logging import get_logger
from tabledb.infrastructure.metrics import MetricsRegistry, get_metrics

logger = get_logger(__name__)

Conditions = Predicate | Mapping[str, str] | None


def as_predicate(conditions: Conditions) -> Predicate:
    """Coerce a column -> value mapping (or None) into a Predicate."""
    if conditions is None:
        return Predicate()
    if isinstance(conditions, Predicate):
        return conditions
    return Predicate.from_mapping(conditions)


class CrudEngine:
    """CRUD operations against the tables of one registry.

    Thread Safety:
        Safe to share between threads. Operations against the same
        registry are serialized by its database lock.
    """

    def __init__(
        self,
        registry: TableRegistry,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: The registry whose tables the engine operates on.
            metrics: Metrics to record into (default: global registry).
        """
        self._registry = registry
        self._metrics = metrics or get_metrics()
        self._logger = logger.bind(database=registry.name)

    @property
    def registry(self) -> TableRegistry:
        return self._registry

    def create_table(self, name: str, columns: Sequence[str]) -> Table:
        """Create an empty table.

        Raises:
            InvalidIdentifierError: If the name or a column fails the grammar.
            TableAlreadyExistsError: If the name is taken.
        """
        with self._observe("create_table"):
            table = self._registry.create_table(name, columns)

        self._metrics.tables.labels(database=self._registry.name).set(len(self._registry))
        self._logger.info("table_created", table=name, columns=list(table.columns))
        return table

    def insert(self, table_name: str, data: Mapping[str, str]) -> Row:
        """Append one row given as a field mapping.

        Fields may be omitted or reordered; omitted fields are stored as "".
        Duplicate rows are allowed.

        Returns:
            A copy of the stored row.

        Raises:
            TableNotFoundError: If the table does not exist.
            UnknownColumnError: If data names an undeclared column.
        """
        with self._observe("insert"), self._locked(table_name) as table:
            row = table.make_row(data)
            table.append(row)
            stored = dict(row)

        self._metrics.rows_affected_total.labels(operation="insert").inc()
        self._logger.debug("row_inserted", table=table_name)
        return stored

    def insert_values(self, table_name: str, values: Sequence[str]) -> Row:
        """Append one row given positionally, aligned with the column order.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnCountMismatchError: If the value count differs from the column count.
        """
        with self._observe("insert"), self._locked(table_name) as table:
            row = table.make_row_from_values(values)
            table.append(row)
            stored = dict(row)

        self._metrics.rows_affected_total.labels(operation="insert").inc()
        self._logger.debug("row_inserted", table=table_name)
        return stored

    def delete(self, table_name: str, conditions: Conditions = None) -> int:
        """Delete the rows matching every condition.

        An empty condition set matches every row.
        A condition on an undeclared column matches no row.

        Returns:
            Number of rows deleted. Zero is not an error.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        predicate = as_predicate(conditions)
        with self._observe("delete"), self._locked(table_name) as table:
            count = table.remove_matching(predicate)

        self._metrics.rows_affected_total.labels(operation="delete").inc(count)
        self._logger.debug("rows_deleted", table=table_name, where=str(predicate), count=count)
        return count

    def update(
        self,
        table_name: str,
        conditions: Conditions,
        values: Mapping[str, str],
    ) -> int:
        """Overwrite fields on the rows matching every condition.

        Only the fields named in values change; everything else on the
        matching rows, and every non-matching row, is left as it was.
        Conditions match rows exactly as for delete.

        Returns:
            Number of rows updated.

        Raises:
            TableNotFoundError: If the table does not exist.
            UnknownColumnError: If values name an undeclared column.
        """
        predicate = as_predicate(conditions)
        with self._observe("update"), self._locked(table_name) as table:
            table.check_columns(values)
            count = table.update_matching(predicate, values)

        self._metrics.rows_affected_total.labels(operation="update").inc(count)
        self._logger.debug(
            "rows_updated", table=table_name, where=str(predicate), fields=list(values), count=count
        )
        return count

    def search(self, table_name: str, conditions: Conditions = None) -> list[Row]:
        """Return copies of the rows matching every condition, in row order.

        Conditions match rows exactly as for delete.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        predicate = as_predicate(conditions)
        with self._observe("search"), self._locked(table_name) as table:
            return table.matching(predicate)

    def columns(self, table_name: str) -> list[str]:
        """Return the declared columns of a table."""
        with self._locked(table_name) as table:
            return list(table.columns)

    def row_count(self, table_name: str) -> int:
        with self._locked(table_name) as table:
            return len(table)

    @contextmanager
    def _locked(self, table_name: str) -> Iterator[Table]:
        """Acquire database then table lock, recording the wait."""
        start = time.perf_counter()
        with self._registry.acquire_table(table_name) as table:
            self._metrics.lock_wait_seconds.observe(time.perf_counter() - start)
            yield table

    @contextmanager
    def _observe(self, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        status = "error"
        try:
            yield
            status = "ok"
        finally:
            self._metrics.operations_total.labels(operation=operation, status=status).inc()
            self._metrics.operation_latency_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )
