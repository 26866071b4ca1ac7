"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
table store depends on, such as the file system.
"""

from tabledb.ports.outbound.table_store import TableStore

__all__ = [
    "TableStore",
]
