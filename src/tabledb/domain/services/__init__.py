"""Domain services for the table store.

Exports:
    - TableRegistry: Table-name -> Table mapping guarded by the database lock
"""

from tabledb.domain.services.table_registry import TableRegistry

__all__ = [
    "TableRegistry",
]
