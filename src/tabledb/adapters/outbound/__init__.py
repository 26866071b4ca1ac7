"""Outbound adapters - implementations of outbound ports.

These adapters implement external dependencies such as the file
system layout of persisted tables.
"""

from tabledb.adapters.outbound.csv_table_store import CsvTableStore

__all__ = [
    "CsvTableStore",
]
