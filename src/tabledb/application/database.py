"""Database - unified entry point for the table store.

This module provides the Database class that wires together the table
registry, the CRUD engine, the command interpreter and the table store.

Usage:
    from tabledb import Database

    db = Database("shop", data_dir="/var/lib/tabledb")

    # Direct API
    db.create_table("users", ["id", "name", "age"])
    db.insert("users", {"id": "1", "name": "Alice", "age": "30"})
    db.update("users", {"name": "Alice"}, {"age": "31"})
    rows = db.search("users", {"id": "1"})

    # Text commands
    result = db.execute("get from users where id=1")
    result.rows  # [{'id': '1', 'name': 'Alice', 'age': '31'}]

    # Persistence: /var/lib/tabledb/shop/users.csv
    db.save()
    snapshot = db.load_table("users")
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from tabledb.adapters.inbound.command_parser import CommandParser
from tabledb.adapters.outbound.csv_table_store import CsvTableStore
from tabledb.application.crud_engine import Conditions, CrudEngine
from tabledb.application.executor import CommandExecutor, ExecutionResult
from tabledb.domain.entities import Row, Table
from tabledb.domain.errors import InvalidCommandError, SaveError, TableWriteError
from tabledb.domain.services import TableRegistry
from tabledb.infrastructure.logging import get_logger
from tabledb.infrastructure.metrics import MetricsRegistry, get_metrics
from tabledb.infrastructure.tracing import trace_span
from tabledb.ports.outbound import TableStore

logger = get_logger(__name__)


class Database:
    """A named collection of tables.

    The name doubles as the directory the tables are saved to, under the
    store's data directory.

    Thread Safety:
        Any number of threads may share a Database. Every operation takes
        the database lock (and then, where a table is touched, that
        table's lock), so operations are serialized, save included.
    """

    def __init__(
        self,
        name: str,
        data_dir: str | Path | None = None,
        store: TableStore | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Create an empty database.

        Args:
            name: Database name and persistence directory name.
            data_dir: Parent directory for the database directory
                (default from config). Ignored when store is given.
            store: Table store to persist through (default: CSV files).
            metrics: Metrics to record into (default: global registry).
        """
        if not name:
            raise ValueError("database name must not be empty")

        self._name = name
        self._metrics = metrics or get_metrics()
        self._registry = TableRegistry(name)
        self._engine = CrudEngine(self._registry, metrics=self._metrics)
        self._parser = CommandParser()
        self._executor = CommandExecutor(self._engine, metrics=self._metrics)
        self._store: TableStore = store or CsvTableStore(data_dir=data_dir)
        self._logger = logger.bind(database=name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> TableStore:
        return self._store

    # Registry

    def create_table(self, name: str, columns: Sequence[str]) -> Table:
        """Create an empty table. See CrudEngine.create_table."""
        return self._engine.create_table(name, columns)

    def get_table(self, name: str) -> Table:
        """Return the live Table registered under name.

        Raises:
            TableNotFoundError: If no table has that name.
        """
        return self._registry.get_table(name)

    def has_table(self, name: str) -> bool:
        return self._registry.has_table(name)

    def table_names(self) -> list[str]:
        """Return table names in creation order."""
        return self._registry.table_names()

    # CRUD

    def insert(self, table: str, data: Mapping[str, str]) -> Row:
        """Append one row given as a field mapping. See CrudEngine.insert."""
        return self._engine.insert(table, data)

    def insert_values(self, table: str, values: Sequence[str]) -> Row:
        """Append one row given positionally. See CrudEngine.insert_values."""
        return self._engine.insert_values(table, values)

    def delete(self, table: str, conditions: Conditions = None) -> int:
        """Delete matching rows. See CrudEngine.delete."""
        return self._engine.delete(table, conditions)

    def update(self, table: str, conditions: Conditions, values: Mapping[str, str]) -> int:
        """Update matching rows. See CrudEngine.update."""
        return self._engine.update(table, conditions, values)

    def search(self, table: str, conditions: Conditions = None) -> list[Row]:
        """Return matching rows. See CrudEngine.search."""
        return self._engine.search(table, conditions)

    # Command interpreter

    def execute(self, command: str) -> ExecutionResult:
        """Execute one text command.

        Args:
            command: A line of the command language, e.g.
                "insert to users 1, ahmad, 23".

        Returns:
            ExecutionResult; for get/select commands ``rows`` holds the
            matched rows. Failures are reported through ``error`` and
            ``message``, never raised.
        """
        with trace_span("tabledb.execute", {"tabledb.database": self._name}) as span:
            try:
                plan = self._parser.parse(command)
            except InvalidCommandError as e:
                self._metrics.commands_total.labels(command="invalid", status="error").inc()
                self._logger.info("command_rejected", command=command, error=str(e))
                span.set_attribute("tabledb.success", False)
                return ExecutionResult.failure(e)

            span.set_attribute("tabledb.command", plan.command_type.value)
            result = self._executor.execute(plan)
            span.set_attribute("tabledb.success", result.success)
            return result

    def execute_many(self, commands: Iterable[str]) -> list[ExecutionResult]:
        """Execute commands in order, one result per command.

        A failing command does not stop the ones after it.
        """
        return [self.execute(command) for command in commands]

    # Persistence

    def save(self) -> list[Path]:
        """Write every table to the store.

        The database lock is held for the whole save, so no other
        operation on this database interleaves with it. Every table is
        attempted even if an earlier one fails.

        Returns:
            Paths of the files written.

        Raises:
            TableWriteError: If the database directory cannot be created
                (nothing is written).
            SaveError: If one or more tables failed to write; carries a
                table name -> error mapping. The other files were written.
        """
        start = time.perf_counter()
        written: list[Path] = []
        errors: dict[str, TableWriteError] = {}

        with trace_span("tabledb.save", {"tabledb.database": self._name}) as span:
            with self._registry.acquire_all() as tables:
                self._store.ensure_database(self._name)

                for table in tables:
                    with table.lock:
                        columns, rows = table.snapshot()
                    try:
                        written.append(self._store.write_table(self._name, table.name, columns, rows))
                    except TableWriteError as e:
                        errors[table.name] = e
                        self._metrics.save_failures_total.inc()
                        self._logger.error("table_save_failed", table=table.name, error=str(e))
                    else:
                        self._metrics.table_files_written_total.inc()

            span.set_attribute("tabledb.tables_written", len(written))
            span.set_attribute("tabledb.tables_failed", len(errors))

        self._metrics.save_duration_seconds.observe(time.perf_counter() - start)
        if errors:
            raise SaveError(errors)

        self._logger.info("database_saved", tables=len(written))
        return written

    def load_table(self, name: str) -> Table:
        """Read a table back from the store.

        Bypasses the live registry: the result is a standalone Table that
        shares nothing with any registered table, and no locks are taken.

        Raises:
            InvalidIdentifierError: If name is not a valid table name.
            TableFileNotFoundError: If the file is missing or empty.
            TableDecodeError: If the file is malformed.
        """
        with trace_span("tabledb.load_table", {"tabledb.database": self._name, "tabledb.table": name}):
            table = self._store.read_table(self._name, name)

        self._logger.debug("table_loaded", table=name, rows=len(table))
        return table

    select_table = load_table

    def restore(self, name: str) -> Table:
        """Load a persisted table and register it in this database.

        Raises:
            TableAlreadyExistsError: If a live table already has that name.
            TableFileNotFoundError, TableDecodeError: As for load_table.
        """
        table = self.load_table(name)
        self._registry.register(table)
        self._metrics.tables.labels(database=self._name).set(len(self._registry))
        self._logger.info("table_restored", table=name, rows=len(table))
        return table

    # Introspection

    def get_stats(self) -> dict[str, Any]:
        """Return table and row counts."""
        rows = {name: self._engine.row_count(name) for name in self.table_names()}
        return {
            "name": self._name,
            "tables": len(rows),
            "rows": rows,
            "total_rows": sum(rows.values()),
        }

    def __repr__(self) -> str:
        return f"Database({self._name!r}, tables={self.table_names()})"
