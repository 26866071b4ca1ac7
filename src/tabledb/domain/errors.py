"""Error taxonomy for the table store.

Every failure the store reports is a subclass of TableDBError so callers
can catch the whole family at once, and each carries the offending
table, column or command fragment as attributes.
"""

from __future__ import annotations

from typing import Mapping


class TableDBError(Exception):
    """Base class for all table store errors."""

    pass


class InvalidIdentifierError(TableDBError):
    """Raised when a table or column name fails the identifier grammar."""

    def __init__(
        self, name: str, kind: str = "identifier", message: str | None = None
    ) -> None:
        self.name = name
        self.kind = kind
        super().__init__(message or f"invalid {kind} name: {name!r}")


class DuplicateColumnError(InvalidIdentifierError):
    """Raised when a column name appears more than once in a table definition."""

    def __init__(self, name: str) -> None:
        super().__init__(name, kind="column", message=f"duplicate column name: {name!r}")


class TableAlreadyExistsError(TableDBError):
    """Raised when creating a table whose name is already registered."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"table {table} already exists")


class TableNotFoundError(TableDBError):
    """Raised when a table name is not registered."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"table {table} does not exist")


class UnknownColumnError(TableDBError):
    """Raised when a field is not among the table's declared columns."""

    def __init__(self, table: str, column: str) -> None:
        self.table = table
        self.column = column
        super().__init__(f"unknown column {column!r} for table {table}")


class ColumnCountMismatchError(TableDBError):
    """Raised when a positional payload length differs from the column count."""

    def __init__(self, table: str, expected: int, actual: int) -> None:
        self.table = table
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"invalid data for table {table}: expected {expected} columns, got {actual}"
        )


class InvalidCommandError(TableDBError):
    """Raised when a text command does not match the command grammar."""

    def __init__(self, command: str, reason: str = "unrecognized command") -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"invalid command: {reason}: {command!r}")


class PersistenceError(TableDBError):
    """Base class for errors raised while reading or writing table files."""

    pass


class TableFileNotFoundError(PersistenceError):
    """Raised when a table file is missing or has no header record."""

    def __init__(self, table: str, path: str) -> None:
        self.table = table
        self.path = path
        super().__init__(f"table file for {table} not found: {path}")


class TableDecodeError(PersistenceError):
    """Raised when a table file cannot be decoded."""

    def __init__(self, table: str, path: str, reason: str) -> None:
        self.table = table
        self.path = path
        self.reason = reason
        super().__init__(f"failed to decode table {table} from {path}: {reason}")


class TableWriteError(PersistenceError):
    """Raised when a directory or table file cannot be written."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"failed to write {target}: {reason}")


class SaveError(PersistenceError):
    """Raised after a save attempted every table and at least one failed."""

    def __init__(self, errors: Mapping[str, TableWriteError]) -> None:
        self.errors = dict(errors)
        names = ", ".join(sorted(self.errors))
        super().__init__(f"failed to save {len(self.errors)} table(s): {names}")
