# app/core/d1/local.py
"""
Local executors - same contract as D1Executor, different place to run SQL.

    SqlAlchemyExecutor  -> the app's own SQLite database (DATABASE_URL)
    WranglerExecutor    -> `npx wrangler d1 execute --local` (miniflare D1 emulation)
"""

import asyncio
import json
import logging
import os
import shutil
import subprocess
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.d1.errors import DatabaseError, SubprocessError
from app.core.d1.executor import (
    ExecutionOutcome,
    QueryExecutor,
    QueryResult,
    Scalar,
    SqlStatement,
)

logger = logging.getLogger(__name__)

WRANGLER_STATE_DIR = ".wrangler/state/v3/d1/miniflare-D1DatabaseObject"


class SqlAlchemyExecutor(QueryExecutor):
    """Runs each statement in its own transaction on an AsyncEngine."""

    target = "local database"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def execute(self, statement: SqlStatement) -> ExecutionOutcome:
        logger.debug(f"Executing locally: {statement.sql}")
        params = tuple(statement.params) if statement.params else None
        try:
            async with self.engine.begin() as conn:
                result = await conn.exec_driver_sql(statement.sql, params)
                rows = (
                    [dict(row._mapping) for row in result] if result.returns_rows else []
                )
        except SQLAlchemyError as error:
            # Prefer the driver message ("table `users` already exists", ...)
            orig = getattr(error, "orig", None)
            message = str(orig) if orig is not None else str(error)
            logger.error(f"Local DB query error: {message}")
            return ExecutionOutcome.failure(DatabaseError(message))
        return ExecutionOutcome.success(rows)

    async def close(self) -> None:
        await self.engine.dispose()

    async def wipe(self) -> None:
        """Drop both tables (toasts first, it references users)."""
        for table in ("toasts", "users"):
            await self.query(f"DROP TABLE IF EXISTS {table}")


# ============================================================================
# WRANGLER CLI
# ============================================================================


def render_literal(value: Scalar) -> str:
    """Render a bind parameter as a SQLite literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def inline_params(sql: str, params: Sequence[Scalar]) -> str:
    """
    Replace `?` placeholders (outside string literals) with rendered values.

    The CLI has no bind parameter support. Surplus placeholders are left in
    place so SQLite reports the mismatch, surplus params are ignored.
    """
    if not params:
        return sql

    values = iter(params)
    out: List[str] = []
    in_string = False
    for char in sql:
        if char == "'":
            in_string = not in_string
        if char == "?" and not in_string:
            try:
                out.append(render_literal(next(values)))
                continue
            except StopIteration:
                pass
        out.append(char)
    return "".join(out)


class WranglerExecutor(QueryExecutor):
    """Shells out to wrangler for every statement, one process per call."""

    target = "local D1 (wrangler)"

    def __init__(
        self,
        database_name: str,
        project_dir: Optional[str] = None,
        state_dir: str = WRANGLER_STATE_DIR,
        verify_ssl: bool = True,
    ):
        self.database_name = database_name
        self.project_dir = project_dir or os.getcwd()
        self.state_dir = state_dir
        self.verify_ssl = verify_ssl

    def command(self, sql: str) -> List[str]:
        return [
            "npx",
            "wrangler",
            "d1",
            "execute",
            self.database_name,
            "--local",
            "--json",
            f"--command={sql}",
        ]

    def _env(self) -> dict:
        env = dict(os.environ)
        if not self.verify_ssl:
            # Only for the child process, never for this interpreter
            env["NODE_TLS_REJECT_UNAUTHORIZED"] = "0"
        return env

    async def execute(self, statement: SqlStatement) -> ExecutionOutcome:
        sql = inline_params(statement.sql, statement.params)
        cmd = self.command(sql)
        logger.debug(f"Running: {' '.join(cmd[:6])} --command=...")

        try:
            completed = await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                text=True,
                cwd=self.project_dir,
                env=self._env(),
            )
        except FileNotFoundError as error:
            return ExecutionOutcome.failure(
                SubprocessError(f"Could not start wrangler: {error}")
            )

        if completed.returncode != 0:
            stderr = (completed.stderr or completed.stdout or "").strip()
            logger.error(f"wrangler exited with {completed.returncode}: {stderr}")
            return ExecutionOutcome.failure(
                SubprocessError(
                    f"wrangler exited with status {completed.returncode}: {stderr}",
                    returncode=completed.returncode,
                    stderr=stderr,
                )
            )

        try:
            rows = parse_wrangler_output(completed.stdout)
        except ValueError as error:
            return ExecutionOutcome.failure(
                SubprocessError(
                    f"Could not parse wrangler output: {error}",
                    returncode=completed.returncode,
                    stderr=completed.stdout,
                )
            )
        return ExecutionOutcome.success(rows)

    async def wipe(self) -> None:
        path = os.path.join(self.project_dir, self.state_dir)
        if not os.path.exists(path):
            logger.info(f"No local D1 state at {path}, nothing to remove")
            return

        logger.info(f"Removing local D1 state: {path}")
        try:
            shutil.rmtree(path)
        except OSError as error:
            logger.warning(f"Could not remove local D1 state {path}: {error}")
            raise SubprocessError(f"Could not remove local D1 state: {error}") from error


def parse_wrangler_output(stdout: str) -> QueryResult:
    """
    `wrangler d1 execute --json` prints a list of result sets.
    Same single-result-set rule as the HTTP API: only the first is returned.
    """
    text = (stdout or "").strip()
    if not text:
        return []

    start = text.find("[")
    if start == -1:
        raise ValueError(f"no JSON array in output: {text[:200]}")

    data = json.loads(text[start:])
    if not data:
        return []

    first = data[0] if isinstance(data, list) else None
    if not isinstance(first, dict):
        raise ValueError(f"unexpected result entry: {type(first).__name__}")

    rows = first.get("results") or []
    if not isinstance(rows, list):
        raise ValueError(f"unexpected results: {type(rows).__name__}")
    return list(rows)
