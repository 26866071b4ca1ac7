"""Inbound adapters for the table store.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    Command Parser:
        - CommandParser: Parser that converts command text to plans
        - CommandPlan: Base class for all command plans
        - CommandType: Kinds of commands
"""

from tabledb.adapters.inbound.command_parser import (
    CommandParser,
    CommandPlan,
    CommandType,
    CreateTablePlan,
    DeletePlan,
    GetPlan,
    InsertPlan,
    UpdatePlan,
)

__all__ = [
    "CommandParser",
    "CommandType",
    # Plans
    "CommandPlan",
    "CreateTablePlan",
    "InsertPlan",
    "UpdatePlan",
    "DeletePlan",
    "GetPlan",
]
