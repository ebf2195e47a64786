from typing import Dict, List, Optional

from app.core.d1.errors import ExecutionError
from app.core.d1.executor import ExecutionOutcome, QueryExecutor, SqlStatement


class ScriptedExecutor(QueryExecutor):
    """Records every statement. Fails those whose SQL contains a given needle."""

    target = "scripted database"

    def __init__(self, failures: Optional[Dict[str, ExecutionError]] = None):
        self.failures = failures or {}
        self.calls: List[SqlStatement] = []

    async def execute(self, statement: SqlStatement) -> ExecutionOutcome:
        self.calls.append(statement)
        for needle, error in self.failures.items():
            if needle in statement.sql:
                return ExecutionOutcome.failure(error)
        return ExecutionOutcome.success([])

    @property
    def sql(self) -> List[str]:
        return [call.sql for call in self.calls]
