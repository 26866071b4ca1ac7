"""Text command parser.

This module turns one line of the store's command language into a
command plan that the executor can run against the CRUD engine.

Supported commands (keywords are case-insensitive, runs of whitespace
collapse to a single space):

    create table <name> has <col>, <col>, ...
    create table <name> (<col>, <col>, ...)
    insert to <name> <value>, <value>, ...
    update <name> set <col>=<value>, ... where <col>=<value>, ...
    delete from <name> where <col>=<value>, ...
    get from <name> where <col>=<value>, ...      ("select" is a synonym)

The comma is the only list separator in the language. It separates
columns, inserted values, SET assignments and WHERE conditions alike;
WHERE conditions are combined with logical AND. A SET or WHERE clause
written with ``and`` between pairs is rejected rather than read as a
single value. Each pair splits on its first ``=`` and both sides are
trimmed.

Names are captured as written and validated by the engine, so a bad
table name surfaces as InvalidIdentifierError, not as a parse failure.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar

from tabledb.domain.errors import InvalidCommandError
from tabledb.domain.value_objects import Predicate, is_valid_identifier


class CommandType(Enum):
    """Types of text commands."""

    CREATE_TABLE = "create"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    GET = "get"


# Command Plans


@dataclass
class CommandPlan(ABC):
    """Base class for parsed commands."""

    command_type: ClassVar[CommandType]

    table_name: str

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass
class CreateTablePlan(CommandPlan):
    """Create a new table."""

    command_type: ClassVar[CommandType] = CommandType.CREATE_TABLE

    columns: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"CreateTable({self.table_name}, [{', '.join(self.columns)}])"


@dataclass
class InsertPlan(CommandPlan):
    """Insert one row given positionally."""

    command_type: ClassVar[CommandType] = CommandType.INSERT

    values: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Insert({self.table_name}, values={self.values})"


@dataclass
class UpdatePlan(CommandPlan):
    """Overwrite fields of the rows matching a predicate."""

    command_type: ClassVar[CommandType] = CommandType.UPDATE

    assignments: dict[str, str] = field(default_factory=dict)
    predicate: Predicate = field(default_factory=Predicate)

    def __str__(self) -> str:
        assigns = ", ".join(f"{k}={v!r}" for k, v in self.assignments.items())
        return f"Update({self.table_name}, SET {assigns} WHERE {self.predicate})"


@dataclass
class DeletePlan(CommandPlan):
    """Delete the rows matching a predicate."""

    command_type: ClassVar[CommandType] = CommandType.DELETE

    predicate: Predicate = field(default_factory=Predicate)

    def __str__(self) -> str:
        return f"Delete({self.table_name} WHERE {self.predicate})"


@dataclass
class GetPlan(CommandPlan):
    """Return the rows matching a predicate."""

    command_type: ClassVar[CommandType] = CommandType.GET

    predicate: Predicate = field(default_factory=Predicate)

    def __str__(self) -> str:
        return f"Get({self.table_name} WHERE {self.predicate})"


_CREATE_HAS = re.compile(r"^table (?P<table>\S+) has (?P<columns>.+)$", re.IGNORECASE)
_CREATE_PARENS = re.compile(r"^table (?P<table>[^\s(]+) ?\((?P<columns>.*)\)$", re.IGNORECASE)
_INSERT = re.compile(r"^to (?P<table>\S+) (?P<values>.+)$", re.IGNORECASE)
_UPDATE = re.compile(
    r"^(?P<table>\S+) set (?P<assignments>.+?) where (?P<conditions>.+)$", re.IGNORECASE
)
_FROM_WHERE = re.compile(r"^from (?P<table>\S+) where (?P<conditions>.+)$", re.IGNORECASE)

# "a=1 and b=2" inside what should be a single value
_AND_SEPARATED = re.compile(r"\sand\s+[A-Za-z_][A-Za-z0-9_]*\s*=", re.IGNORECASE)

LIST_SEPARATOR = ","


class CommandParser:
    """Parser for the text command language.

    Example:
        >>> parser = CommandParser()
        >>> plan = parser.parse("get from users where id=1")
        >>> print(plan)
        Get(users WHERE id = '1')
    """

    def __init__(self) -> None:
        self._actions: dict[str, Callable[[str, str], CommandPlan]] = {
            "create": self._parse_create,
            "insert": self._parse_insert,
            "update": self._parse_update,
            "delete": self._parse_delete,
            "get": self._parse_get,
            "select": self._parse_get,
        }

    @staticmethod
    def normalize(command: str) -> str:
        """Collapse whitespace runs to one space and trim the ends."""
        return " ".join(command.split())

    def parse(self, command: str) -> CommandPlan:
        """Parse one command line into a plan.

        Args:
            command: The command text.

        Returns:
            The plan for the command.

        Raises:
            InvalidCommandError: If the text does not match the grammar.
        """
        text = self.normalize(command)
        if not text:
            raise InvalidCommandError(command, "empty command")

        action, _, remainder = text.partition(" ")
        handler = self._actions.get(action.lower())
        if handler is None:
            raise InvalidCommandError(command, f"unknown action {action!r}")

        return handler(remainder, command)

    def _parse_create(self, remainder: str, command: str) -> CommandPlan:
        match = _CREATE_HAS.match(remainder) or _CREATE_PARENS.match(remainder)
        if match is None:
            raise InvalidCommandError(
                command, "expected 'create table <name> has <col>, ...' or 'create table <name> (<col>, ...)'"
            )

        columns = match.group("columns").strip()
        if not columns:
            raise InvalidCommandError(command, "a table needs at least one column")

        return CreateTablePlan(
            table_name=match.group("table"),
            columns=self._split_list(columns),
        )

    def _parse_insert(self, remainder: str, command: str) -> CommandPlan:
        match = _INSERT.match(remainder)
        if match is None:
            raise InvalidCommandError(command, "expected 'insert to <name> <value>, ...'")

        return InsertPlan(
            table_name=match.group("table"),
            values=self._split_list(match.group("values")),
        )

    def _parse_update(self, remainder: str, command: str) -> CommandPlan:
        match = _UPDATE.match(remainder)
        if match is None:
            raise InvalidCommandError(
                command, "expected 'update <name> set <col>=<value>, ... where <col>=<value>, ...'"
            )

        assignments = self._parse_pairs(match.group("assignments"), "SET", command)
        conditions = self._parse_pairs(match.group("conditions"), "WHERE", command)

        return UpdatePlan(
            table_name=match.group("table"),
            assignments=dict(assignments),
            predicate=Predicate.from_pairs(conditions),
        )

    def _parse_delete(self, remainder: str, command: str) -> CommandPlan:
        table, predicate = self._parse_from_where(remainder, "delete", command)
        return DeletePlan(table_name=table, predicate=predicate)

    def _parse_get(self, remainder: str, command: str) -> CommandPlan:
        table, predicate = self._parse_from_where(remainder, "get", command)
        return GetPlan(table_name=table, predicate=predicate)

    def _parse_from_where(self, remainder: str, action: str, command: str) -> tuple[str, Predicate]:
        match = _FROM_WHERE.match(remainder)
        if match is None:
            raise InvalidCommandError(
                command, f"expected '{action} from <name> where <col>=<value>, ...'"
            )

        conditions = self._parse_pairs(match.group("conditions"), "WHERE", command)
        return match.group("table"), Predicate.from_pairs(conditions)

    def _parse_pairs(self, clause: str, clause_name: str, command: str) -> list[tuple[str, str]]:
        """Split a SET or WHERE clause into ordered (column, value) pairs."""
        pairs = []
        for part in clause.split(LIST_SEPARATOR):
            key, sep, value = part.partition("=")
            key = key.strip()
            value = value.strip()

            if not sep:
                raise InvalidCommandError(
                    command, f"expected <col>=<value> in {clause_name} clause, got {part.strip()!r}"
                )
            if not is_valid_identifier(key):
                raise InvalidCommandError(
                    command, f"invalid column {key!r} in {clause_name} clause"
                )
            if _AND_SEPARATED.search(value):
                raise InvalidCommandError(
                    command, f"pairs in a {clause_name} clause are separated by ',' not 'and'"
                )

            pairs.append((key, value))
        return pairs

    @staticmethod
    def _split_list(text: str) -> list[str]:
        return [item.strip() for item in text.split(LIST_SEPARATOR)]
