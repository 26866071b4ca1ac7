"""Table entity - the in-memory store for one table.

A table owns an ordered, immutable list of column names and an ordered
list of rows. Rows are field-name -> value mappings. Every row holds a
value for every declared column: fields omitted at insert time are
stored as the empty string, which is also how they serialize to disk.

Row order is insertion order. Deleting rebuilds the row list from the
surviving rows; updating mutates matching rows in place. Neither ever
reorders the rows that remain.

Thread Safety:
    Each table carries its own lock guarding the row list. The table
    does not acquire it itself: callers take the database lock and then
    the table lock (see TableRegistry.acquire_table) before calling any
    method that reads or mutates rows.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Sequence

from tabledb.domain.errors import ColumnCountMismatchError, UnknownColumnError
from tabledb.domain.value_objects import Predicate, validate_column_names, validate_table_name

Row = dict[str, str]
"""One record: column name -> string value."""


@dataclass(eq=False)
class Table:
    """A named table of string rows.

    Attributes:
        name: The table name.
        columns: Declared column names, in order. Fixed at creation.
        rows: Rows in insertion order.
        lock: Mutual exclusion for the row list.
    """

    name: str
    columns: tuple[str, ...]
    rows: list[Row] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def create(cls, name: str, columns: Iterable[str]) -> Table:
        """Create an empty table after validating its name and columns.

        Raises:
            InvalidIdentifierError: If the name or a column fails the grammar.
            DuplicateColumnError: If a column name repeats.
        """
        table_name = validate_table_name(name)
        column_names = validate_column_names(columns)
        return cls(name=table_name, columns=column_names)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def check_columns(self, fields: Iterable[str]) -> None:
        """Ensure every field is a declared column.

        Raises:
            UnknownColumnError: Naming the first undeclared field.
        """
        for name in fields:
            if name not in self.columns:
                raise UnknownColumnError(self.name, name)

    def make_row(self, data: Mapping[str, str]) -> Row:
        """Build a full row from a (possibly partial) field mapping.

        Fields are laid out in column order; missing fields become "".

        Raises:
            UnknownColumnError: If data names an undeclared column.
        """
        self.check_columns(data)
        return {column: str(data.get(column, "")) for column in self.columns}

    def make_row_from_values(self, values: Sequence[str]) -> Row:
        """Build a row from values aligned with the column order.

        Raises:
            ColumnCountMismatchError: If len(values) != len(columns).
        """
        if len(values) != len(self.columns):
            raise ColumnCountMismatchError(self.name, len(self.columns), len(values))
        return {column: str(value) for column, value in zip(self.columns, values)}

    def append(self, row: Row) -> None:
        self.rows.append(row)

    def matching(self, predicate: Predicate) -> list[Row]:
        """Return copies of the rows matching predicate, in order."""
        return [dict(row) for row in self.rows if predicate.matches(row)]

    def remove_matching(self, predicate: Predicate) -> int:
        """Drop rows matching predicate, keeping survivors in order.

        Returns:
            Number of rows removed.
        """
        survivors = [row for row in self.rows if not predicate.matches(row)]
        removed = len(self.rows) - len(survivors)
        self.rows = survivors
        return removed

    def update_matching(self, predicate: Predicate, values: Mapping[str, str]) -> int:
        """Overwrite fields of matching rows in place.

        Fields not named in values are left untouched.

        Returns:
            Number of rows updated.
        """
        count = 0
        for row in self.rows:
            if predicate.matches(row):
                for column, value in values.items():
                    row[column] = str(value)
                count += 1
        return count

    def snapshot(self) -> tuple[tuple[str, ...], list[list[str]]]:
        """Return the header and rows as positional values for encoding."""
        return self.columns, [
            [row.get(column, "") for column in self.columns] for row in self.rows
        ]

    def __repr__(self) -> str:
        return f"Table({self.name}, columns={list(self.columns)}, rows={len(self.rows)})"
