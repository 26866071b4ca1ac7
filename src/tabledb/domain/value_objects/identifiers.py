"""Identifier grammar for table and column names.

Names start with an ASCII letter or underscore, followed by letters,
digits or underscores. The same rule applies to table names (which also
become file names on disk) and to column names.
"""

from __future__ import annotations

import re
from typing import Iterable, NewType

from tabledb.domain.errors import DuplicateColumnError, InvalidIdentifierError

TableName = NewType("TableName", str)
"""A validated table name. Unique within a database."""

ColumnName = NewType("ColumnName", str)
"""A validated column name. Unique within a table."""

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_identifier(name: str) -> bool:
    """Return True if name matches the identifier grammar."""
    return isinstance(name, str) and IDENTIFIER_PATTERN.fullmatch(name) is not None


def validate_table_name(name: str) -> TableName:
    """Validate a table name.

    Raises:
        InvalidIdentifierError: If the name fails the identifier grammar.
    """
    if not is_valid_identifier(name):
        raise InvalidIdentifierError(name, kind="table")
    return TableName(name)


def validate_column_names(columns: Iterable[str]) -> tuple[ColumnName, ...]:
    """Validate an ordered list of column names.

    Every name is checked against the grammar before duplicates are
    looked for, so the first malformed name is the one reported.

    Raises:
        InvalidIdentifierError: If there are no names, or a name fails
            the identifier grammar.
        DuplicateColumnError: If a name appears more than once.
    """
    names = list(columns)
    if not names:
        raise InvalidIdentifierError("", kind="column", message="a table needs at least one column")

    for name in names:
        if not is_valid_identifier(name):
            raise InvalidIdentifierError(name, kind="column")

    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise DuplicateColumnError(name)
        seen.add(name)

    return tuple(ColumnName(name) for name in names)
