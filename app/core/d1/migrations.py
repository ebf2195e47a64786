# app/core/d1/migrations.py
"""
MIGRATION APPLIER - Apply a migration script statement by statement

Migration files are plain SQL with statements separated by the breakpoint
marker (drizzle-kit output format):

    CREATE TABLE `users` (...);
    --> statement-breakpoint
    CREATE TABLE `toasts` (...);

Rules:
    - statements run strictly in order (later ones may need earlier tables)
    - "already exists" failures are skipped with a warning
    - any other failure stops the run and raises MigrationError
    - nothing is retried and nothing already applied is rolled back
"""

import logging
from pathlib import Path
from typing import List, Union

from app.core.d1.errors import MigrationError
from app.core.d1.executor import QueryExecutor, SqlStatement
from app.core.d1.report import RunReport

logger = logging.getLogger(__name__)

STATEMENT_BREAKPOINT = "--> statement-breakpoint"
ALREADY_EXISTS = "already exists"

LIST_TABLES_SQL = (
    "SELECT name FROM sqlite_master WHERE type='table' "
    "AND name NOT LIKE '_cf%' AND name NOT LIKE 'sqlite_%' ORDER BY name"
)


def split_statements(script: str) -> List[str]:
    """Split on the breakpoint marker, trim, drop empty segments."""
    return [
        part.strip()
        for part in script.split(STATEMENT_BREAKPOINT)
        if part.strip()
    ]


def migration_files(directory: Union[str, Path]) -> List[Path]:
    """All *.sql files in filename order (0000_..., 0001_..., ...)."""
    return sorted(Path(directory).glob("*.sql"))


class MigrationApplier:
    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    async def apply(self, script: str, name: str = "migration") -> RunReport:
        statements = split_statements(script)
        report = RunReport(name=name)
        logger.info(f"Applying {name}: found {len(statements)} SQL statements")

        for index, statement in enumerate(statements, start=1):
            label = f"{name}#{index}"
            logger.info(f"Executing statement {index}/{len(statements)}...")
            outcome = await self.executor.execute(SqlStatement(statement))

            if outcome.ok:
                report.add(label, outcome)
                continue

            if ALREADY_EXISTS in outcome.message:
                logger.warning(f"Statement {index} skipped, object already exists")
                report.add(label, outcome, skipped=True)
                continue

            report.add(label, outcome)
            raise MigrationError(
                f"Statement {index}/{len(statements)} of {name} failed: {outcome.message}",
                index=index,
                statement=statement,
                cause=outcome.error.to_exception(),
            )

        return report

    async def apply_file(self, path: Union[str, Path]) -> RunReport:
        path = Path(path)
        return await self.apply(path.read_text(encoding="utf-8"), name=path.name)

    async def apply_directory(self, directory: Union[str, Path]) -> RunReport:
        files = migration_files(directory)
        report = RunReport(name=str(directory))
        if not files:
            logger.warning(f"No migration files found in {directory}")

        for path in files:
            report.extend(await self.apply_file(path))
        return report

    async def list_tables(self) -> List[str]:
        rows = await self.executor.query(LIST_TABLES_SQL)
        return [row["name"] for row in rows]


