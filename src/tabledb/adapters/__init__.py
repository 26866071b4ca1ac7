"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (text commands)
- Outbound adapters: Implement external dependencies (CSV files)
"""

from tabledb.adapters.inbound import CommandParser
from tabledb.adapters.outbound import CsvTableStore

__all__ = [
    # Inbound adapters
    "CommandParser",
    # Outbound adapters
    "CsvTableStore",
]
