"""
TableDB - Embeddable Tabular Data Store

An in-process store of named tables holding string rows, with CRUD
operations, a small text command interpreter and CSV persistence.
"""

__version__ = "1.0.2"
__author__ = "Systems Engineering Portfolio"

from tabledb.application import Database, ExecutionResult
from tabledb.domain.entities import Row, Table
from tabledb.domain.errors import (
    ColumnCountMismatchError,
    DuplicateColumnError,
    InvalidCommandError,
    InvalidIdentifierError,
    PersistenceError,
    SaveError,
    TableAlreadyExistsError,
    TableDBError,
    TableDecodeError,
    TableFileNotFoundError,
    TableNotFoundError,
    TableWriteError,
    UnknownColumnError,
)
from tabledb.domain.value_objects import Condition, Predicate

__all__ = [
    "Database",
    "ExecutionResult",
    "Table",
    "Row",
    "Predicate",
    "Condition",
    # Errors
    "TableDBError",
    "InvalidIdentifierError",
    "DuplicateColumnError",
    "TableAlreadyExistsError",
    "TableNotFoundError",
    "UnknownColumnError",
    "ColumnCountMismatchError",
    "InvalidCommandError",
    "PersistenceError",
    "TableFileNotFoundError",
    "TableDecodeError",
    "TableWriteError",
    "SaveError",
]
