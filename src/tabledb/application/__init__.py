"""Application layer for the table store.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    - Database: Main entry point for the store
    - CrudEngine: CRUD operations and the locking protocol
    - CommandExecutor: Runs parsed text commands
    - ExecutionResult: Result of a text command
"""

from tabledb.application.crud_engine import CrudEngine, as_predicate
from tabledb.application.database import Database
from tabledb.application.executor import CommandExecutor, ExecutionResult

__all__ = [
    "Database",
    "CrudEngine",
    "CommandExecutor",
    "ExecutionResult",
    "as_predicate",
]
