"""Command executor - runs parsed command plans against the CRUD engine.

The executor is the boundary between the exception-raising core and the
text command surface: every store error raised while running a plan is
captured in the returned ExecutionResult, so a bad command never
propagates out to the caller as an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tabledb.adapters.inbound.command_parser import (
    CommandPlan,
    CreateTablePlan,
    DeletePlan,
    GetPlan,
    InsertPlan,
    UpdatePlan,
)
from tabledb.application.crud_engine import CrudEngine
from tabledb.domain.entities import Row
from tabledb.domain.errors import InvalidCommandError, TableDBError
from tabledb.infrastructure.logging import get_logger
from tabledb.infrastructure.metrics import MetricsRegistry, get_metrics

logger = get_logger(__name__)


@dataclass
class ExecutionResult:
    """Result of running one command."""

    rows: list[Row] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""
    columns: list[str] = field(default_factory=list)
    error: TableDBError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: TableDBError) -> ExecutionResult:
        return cls(message=str(error), error=error)


class CommandExecutor:
    """Executes command plans.

    Example:
        >>> executor = CommandExecutor(engine)
        >>> result = executor.execute(GetPlan("users", Predicate.where(id="1")))
        >>> result.rows
        [{'id': '1', 'name': 'ahmad', 'age': '23'}]
    """

    def __init__(self, engine: CrudEngine, metrics: MetricsRegistry | None = None) -> None:
        self._engine = engine
        self._metrics = metrics or get_metrics()

    def execute(self, plan: CommandPlan) -> ExecutionResult:
        """Execute a plan.

        Args:
            plan: A parsed command.

        Returns:
            ExecutionResult with rows and/or a status message. Store errors
            are reported in ``error`` rather than raised.
        """
        command = plan.command_type.value
        try:
            result = self._dispatch(plan)
        except TableDBError as e:
            self._metrics.commands_total.labels(command=command, status="error").inc()
            logger.info("command_failed", command=str(plan), error=str(e))
            return ExecutionResult.failure(e)

        self._metrics.commands_total.labels(command=command, status="ok").inc()
        return result

    def _dispatch(self, plan: CommandPlan) -> ExecutionResult:
        if isinstance(plan, CreateTablePlan):
            return self._execute_create_table(plan)
        elif isinstance(plan, InsertPlan):
            return self._execute_insert(plan)
        elif isinstance(plan, UpdatePlan):
            return self._execute_update(plan)
        elif isinstance(plan, DeletePlan):
            return self._execute_delete(plan)
        elif isinstance(plan, GetPlan):
            return self._execute_get(plan)
        raise InvalidCommandError(str(plan), f"unsupported plan {type(plan).__name__}")

    def _execute_create_table(self, plan: CreateTablePlan) -> ExecutionResult:
        table = self._engine.create_table(plan.table_name, plan.columns)
        return ExecutionResult(
            message=f"OK: Table '{table.name}' created",
            columns=list(table.columns),
        )

    def _execute_insert(self, plan: InsertPlan) -> ExecutionResult:
        row = self._engine.insert_values(plan.table_name, plan.values)
        return ExecutionResult(
            rows=[row],
            affected_rows=1,
            message="OK: 1 row(s) inserted",
            columns=list(row),
        )

    def _execute_update(self, plan: UpdatePlan) -> ExecutionResult:
        count = self._engine.update(plan.table_name, plan.predicate, plan.assignments)
        return ExecutionResult(affected_rows=count, message=f"OK: {count} row(s) updated")

    def _execute_delete(self, plan: DeletePlan) -> ExecutionResult:
        count = self._engine.delete(plan.table_name, plan.predicate)
        return ExecutionResult(affected_rows=count, message=f"OK: {count} row(s) deleted")

    def _execute_get(self, plan: GetPlan) -> ExecutionResult:
        columns = self._engine.columns(plan.table_name)
        rows = self._engine.search(plan.table_name, plan.predicate)
        return ExecutionResult(
            rows=rows,
            message=f"OK: {len(rows)} row(s) found",
            columns=columns,
        )
