"""Value objects for the table store domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Identifiers:
        - TableName, ColumnName: Validated name types
        - IDENTIFIER_PATTERN: The naming rule for tables and columns
        - is_valid_identifier, validate_table_name, validate_column_names

    Predicates:
        - ComparisonOp: Operators usable in a condition
        - Condition: A single column test
        - Predicate: Conjunction of conditions
"""

from tabledb.domain.value_objects.identifiers import (
    IDENTIFIER_PATTERN,
    ColumnName,
    TableName,
    is_valid_identifier,
    validate_column_names,
    validate_table_name,
)
from tabledb.domain.value_objects.predicate import ComparisonOp, Condition, Predicate

__all__ = [
    # Identifiers
    "TableName",
    "ColumnName",
    "IDENTIFIER_PATTERN",
    "is_valid_identifier",
    "validate_table_name",
    "validate_column_names",
    # Predicates
    "ComparisonOp",
    "Condition",
    "Predicate",
]
