import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.executor import ExecutionOutcome, QueryExecutor, Row, SqlStatement
from app.core.d1.migrations import MigrationApplier
from app.core.d1.report import RunReport
from app.core.sample_data import SAMPLE_TOASTS, SAMPLE_USERS


# -----------------------------------------------------------------------------
# ORCHESTRATORS - seed / clear / sync / setup
# Every orchestrator is a plain sequence of executor calls, one at a time.
# Ordering: users are written before toasts and deleted after toasts.
# Row level failures are collected in a RunReport, never raised.
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)

CONFIRM_TOKEN = "--confirm"

INSERT_USER_IGNORE = "INSERT OR IGNORE INTO users (userID, name) VALUES (?, ?)"
INSERT_TOAST_IGNORE = (
    "INSERT OR IGNORE INTO toasts (toastID, toasterID, toastieID, toastTime) "
    "VALUES (?, ?, ?, datetime('now'))"
)
INSERT_USER = "INSERT INTO users (userID, name) VALUES (?, ?)"
INSERT_TOAST = (
    "INSERT INTO toasts (toastID, toasterID, toastieID, toastTime) "
    "VALUES (?, ?, ?, ?)"
)
SELECT_USERS = "SELECT userID, name FROM users"
SELECT_TOASTS = "SELECT toastID, toasterID, toastieID, toastTime FROM toasts"
SAMPLE_TOASTS_SQL = (
    "SELECT t.toastID, u1.name as toasterName, u2.name as toastieName, t.toastTime "
    "FROM toasts t "
    "JOIN users u1 ON t.toasterID = u1.userID "
    "JOIN users u2 ON t.toastieID = u2.userID "
    "LIMIT 3"
)

# Children before parents when deleting
TABLES_DELETE_ORDER = ("toasts", "users")


@dataclass
class Snapshot:
    """All rows of both tables, read from one database."""

    users: List[Row] = field(default_factory=list)
    toasts: List[Row] = field(default_factory=list)


async def _run(
    executor: QueryExecutor,
    report: RunReport,
    label: str,
    sql: str,
    params: tuple = (),
) -> bool:
    outcome = await executor.execute(SqlStatement(sql, params))
    report.add(label, outcome)
    if outcome.ok:
        logger.info(f"{report.name}: {label} ok")
    else:
        logger.warning(f"{report.name}: {label} failed: {outcome.message}")
    return outcome.ok


async def table_counts(executor: QueryExecutor) -> Dict[str, Optional[int]]:
    """Row count per table, None when the table can't be read."""
    counts: Dict[str, Optional[int]] = {}
    for table in ("users", "toasts"):
        outcome = await executor.execute(
            SqlStatement(f"SELECT COUNT(*) as count FROM {table}")
        )
        if not outcome.ok:
            logger.warning(f"Could not count {table}: {outcome.message}")
            counts[table] = None
            continue
        counts[table] = int(outcome.rows[0]["count"]) if outcome.rows else 0
    return counts


# ============================================================================
# SEED
# ============================================================================


async def seed(
    executor: QueryExecutor,
    users: Optional[List[Dict[str, str]]] = None,
    toasts: Optional[List[Dict[str, str]]] = None,
) -> RunReport:
    """
    Insert the fixed users, then the fixed toasts, with INSERT OR IGNORE.

    Re-running is safe. A failed row is recorded and the next row still runs.
    """
    users = SAMPLE_USERS if users is None else users
    toasts = SAMPLE_TOASTS if toasts is None else toasts
    report = RunReport(name="seed")

    for user in users:
        await _run(
            executor,
            report,
            f"user:{user['userID']}",
            INSERT_USER_IGNORE,
            (user["userID"], user["name"]),
        )

    for toast in toasts:
        await _run(
            executor,
            report,
            f"toast:{toast['toastID']}",
            INSERT_TOAST_IGNORE,
            (toast["toastID"], toast["toasterID"], toast["toastieID"]),
        )

    return report


async def seed_summary(executor: QueryExecutor) -> Dict[str, Any]:
    """Counts plus a few sample rows, used to verify a seed run."""
    counts = await table_counts(executor)
    sample_users = await executor.query("SELECT userID, name FROM users LIMIT 3")
    sample_toasts = await executor.query(SAMPLE_TOASTS_SQL)
    return {
        "counts": counts,
        "sample_users": sample_users,
        "sample_toasts": sample_toasts,
    }


# ============================================================================
# CLEAR
# ============================================================================


async def clear_tables(executor: QueryExecutor) -> RunReport:
    report = RunReport(name="clear")
    for table in TABLES_DELETE_ORDER:
        await _run(executor, report, f"clear:{table}", f"DELETE FROM {table}")
    return report


async def clear_remote(
    executor: QueryExecutor, confirm_token: Optional[str]
) -> RunReport:
    """Destructive run against production: refuses without the literal token."""
    if confirm_token != CONFIRM_TOKEN:
        raise ConfigError(
            f"Safety check failed! Pass {CONFIRM_TOKEN} to clear the database."
        )
    return await clear_tables(executor)


# ============================================================================
# SYNC / SETUP
# ============================================================================


async def fetch_snapshot(source: QueryExecutor) -> Snapshot:
    """Read everything from `source`. Any failure here is fatal to the run."""
    users = await source.query(SELECT_USERS)
    logger.info(f"Found {len(users)} users in {source.target}")
    toasts = await source.query(SELECT_TOASTS)
    logger.info(f"Found {len(toasts)} toasts in {source.target}")
    return Snapshot(users=users, toasts=toasts)


async def load_snapshot(target: QueryExecutor, snapshot: Snapshot) -> RunReport:
    report = RunReport(name="load")

    for user in snapshot.users:
        await _run(
            target,
            report,
            f"user:{user['userID']}",
            INSERT_USER,
            (user["userID"], user["name"]),
        )

    for toast in snapshot.toasts:
        await _run(
            target,
            report,
            f"toast:{toast['toastID']}",
            INSERT_TOAST,
            (
                toast["toastID"],
                toast["toasterID"],
                toast["toastieID"],
                toast["toastTime"],
            ),
        )

    return report


async def sync(source: QueryExecutor, target: QueryExecutor) -> RunReport:
    """
    Make `target` hold exactly what `source` holds.

    Destructive then additive: target rows missing from source are lost.
    """
    snapshot = await fetch_snapshot(source)

    report = RunReport(name="sync")
    report.extend(await clear_tables(target))
    report.extend(await load_snapshot(target, snapshot))
    return report


async def setup_local(
    source: QueryExecutor,
    target: QueryExecutor,
    migrations_dir: Union[str, Path],
) -> RunReport:
    """Wipe local state, apply migrations, then copy the remote rows in."""
    report = RunReport(name="setup")

    wipe = getattr(target, "wipe", None)
    if wipe is not None:
        try:
            await wipe()
        except ExecutionError as error:
            logger.warning(f"Could not wipe {target.target}: {error}")
            report.add("wipe", ExecutionOutcome.failure(error))

    # MigrationError propagates, there is nothing to insert into without tables
    report.extend(await MigrationApplier(target).apply_directory(migrations_dir))

    snapshot = await fetch_snapshot(source)
    report.extend(await load_snapshot(target, snapshot))
    return report


async def check_connection(executor: QueryExecutor) -> Dict[str, Any]:
    tables = await MigrationApplier(executor).list_tables()
    counts: Dict[str, int] = {}
    for table in ("users", "toasts"):
        if table in tables:
            rows = await executor.query(f"SELECT COUNT(*) as count FROM {table}")
            counts[table] = int(rows[0]["count"]) if rows else 0
    return {"tables": tables, "counts": counts}
