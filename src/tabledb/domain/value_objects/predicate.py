"""Row predicates described as data.

A predicate is an ordered conjunction of conditions. Each condition
compares one column of a row against an expected value. Equality is the
only operator today; comparisons are exact, case-sensitive string
comparisons with no wildcards.

The command parser and the direct API build the same Predicate values,
so a predicate can be inspected, compared and printed like any other
value object.

Example:
    >>> p = Predicate.where(name="Bob", age="25")
    >>> p.matches({"id": "2", "name": "Bob", "age": "25"})
    True
    >>> str(p)
    "name = 'Bob' AND age = '25'"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping


class ComparisonOp(Enum):
    """Comparison operators for conditions."""

    EQ = "="

    def apply(self, actual: str | None, expected: str) -> bool:
        """Compare a stored value against the expected one."""
        if actual is None:
            return False
        if self is ComparisonOp.EQ:
            return actual == expected
        return False


@dataclass(frozen=True, slots=True)
class Condition:
    """A single column test, e.g. ``name = 'Bob'``."""

    column: str
    value: str
    op: ComparisonOp = ComparisonOp.EQ

    def matches(self, row: Mapping[str, str]) -> bool:
        return self.op.apply(row.get(self.column), self.value)

    def __str__(self) -> str:
        return f"{self.column} {self.op.value} {self.value!r}"


@dataclass(frozen=True, slots=True)
class Predicate:
    """Conjunction of conditions.

    An empty predicate has no condition that can fail, so it matches
    every row.
    """

    conditions: tuple[Condition, ...] = ()

    @classmethod
    def from_mapping(cls, conditions: Mapping[str, str]) -> Predicate:
        """Build an equality predicate from a column -> value mapping."""
        return cls(tuple(Condition(column, value) for column, value in conditions.items()))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> Predicate:
        """Build an equality predicate from ordered (column, value) pairs."""
        return cls(tuple(Condition(column, value) for column, value in pairs))

    @classmethod
    def where(cls, **conditions: str) -> Predicate:
        """Keyword shorthand for from_mapping."""
        return cls.from_mapping(conditions)

    @property
    def columns(self) -> list[str]:
        """Columns referenced by the predicate, in order, without repeats."""
        return list(dict.fromkeys(c.column for c in self.conditions))

    def is_empty(self) -> bool:
        return not self.conditions

    def matches(self, row: Mapping[str, str]) -> bool:
        return all(condition.matches(row) for condition in self.conditions)

    def __len__(self) -> int:
        return len(self.conditions)

    def __str__(self) -> str:
        if not self.conditions:
            return "TRUE"
        return " AND ".join(str(c) for c in self.conditions)
