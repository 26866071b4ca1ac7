"""Domain entities for the table store.

Exports:
    - Table: In-memory table with columns, rows and a row lock
    - Row: A record as a column name -> value mapping
"""

from tabledb.domain.entities.table import Row, Table

__all__ = [
    "Row",
    "Table",
]
