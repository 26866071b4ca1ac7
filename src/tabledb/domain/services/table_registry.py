"""Table registry - the table-name -> Table mapping of one database.

The registry owns the database-wide lock. That lock guards the mapping
itself (creation and existence lookups); each Table's own lock guards
its rows.

Lock Order:
    Database lock first, then the table lock. Release happens in reverse
    order. Every code path that needs both goes through acquire_table(),
    whose nested ``with`` blocks release on every exit path, including
    exceptions raised while the locks are held. Since no path ever holds
    a table lock while waiting for the database lock, two operations can
    never deadlock on these locks.

Thread Safety:
    All public methods are safe to call from multiple threads. The
    database lock is held for the whole of a table-touching operation,
    so operations against one database are serialized even across
    unrelated tables.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator

from tabledb.domain.entities import Table
from tabledb.domain.errors import TableAlreadyExistsError, TableNotFoundError
from tabledb.domain.value_objects import validate_table_name


class TableRegistry:
    """Registry of the tables in one database."""

    def __init__(self, name: str) -> None:
        """Initialize an empty registry.

        Args:
            name: The database name (also its persistence directory name).
        """
        self._name = name
        self._lock = threading.Lock()
        self._tables: dict[str, Table] = {}

    @property
    def name(self) -> str:
        return self._name

    def create_table(self, name: str, columns: Iterable[str]) -> Table:
        """Create and register an empty table.

        The name and every column are validated before existence is
        checked, so a malformed name is reported even if a table with
        that name could never exist.

        Raises:
            InvalidIdentifierError: If the name or a column fails the grammar.
            DuplicateColumnError: If a column name repeats.
            TableAlreadyExistsError: If the name is already registered.
        """
        table = Table.create(name, columns)

        with self._lock:
            if table.name in self._tables:
                raise TableAlreadyExistsError(table.name)
            self._tables[table.name] = table
            return table

    def register(self, table: Table) -> None:
        """Register an existing Table value under its own name.

        Raises:
            InvalidIdentifierError: If the table name fails the grammar.
            TableAlreadyExistsError: If the name is already registered.
        """
        validate_table_name(table.name)
        with self._lock:
            if table.name in self._tables:
                raise TableAlreadyExistsError(table.name)
            self._tables[table.name] = table

    def get_table(self, name: str) -> Table:
        """Look up a table by name.

        Raises:
            TableNotFoundError: If no table has that name.
        """
        with self._lock:
            return self._lookup(name)

    def has_table(self, name: str) -> bool:
        with self._lock:
            return name in self._tables

    def table_names(self) -> list[str]:
        """Return table names in creation order."""
        with self._lock:
            return list(self._tables)

    @contextmanager
    def acquire_table(self, name: str) -> Iterator[Table]:
        """Hold the database lock and then the table's lock.

        Yields:
            The table, with both locks held for the duration of the block.

        Raises:
            TableNotFoundError: If no table has that name. Raised with the
                database lock held and released on the way out.
        """
        with self._lock:
            table = self._lookup(name)
            with table.lock:
                yield table

    @contextmanager
    def acquire_all(self) -> Iterator[list[Table]]:
        """Hold the database lock for a pass over every table.

        Callers take each table's own lock while they touch its rows.
        """
        with self._lock:
            yield list(self._tables.values())

    def _lookup(self, name: str) -> Table:
        table = self._tables.get(name)
        if table is None:
            raise TableNotFoundError(name)
        return table

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_table(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)
