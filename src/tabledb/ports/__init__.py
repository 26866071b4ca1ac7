"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (e.g., TableStore)

Adapters implement these ports with concrete functionality.
"""

from tabledb.ports.outbound import TableStore

__all__ = [
    # Outbound ports
    "TableStore",
]
