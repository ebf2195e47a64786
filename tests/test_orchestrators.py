import pytest

from app.core.d1 import orchestrators
from app.core.d1.errors import ConfigError, DatabaseError, SubprocessError, TransportError
from app.core.d1.orchestrators import (
    check_connection,
    clear_remote,
    clear_tables,
    seed,
    seed_summary,
    setup_local,
    sync,
    table_counts,
)
from app.core.sample_data import SAMPLE_TOASTS, SAMPLE_USERS

from conftest import MIGRATIONS_DIR
from fakes import ScriptedExecutor


async def all_rows(executor):
    users = await executor.query(orchestrators.SELECT_USERS)
    toasts = await executor.query(orchestrators.SELECT_TOASTS)
    return (
        {(u["userID"], u["name"]) for u in users},
        {(t["toastID"], t["toasterID"], t["toastieID"], t["toastTime"]) for t in toasts},
    )


# =========================
# SEED
# =========================
@pytest.mark.asyncio
async def test_seed_inserts_fixed_dataset(local_db):
    report = await seed(local_db)

    assert report.ok
    assert len(report.items) == len(SAMPLE_USERS) + len(SAMPLE_TOASTS)
    assert await table_counts(local_db) == {
        "users": len(SAMPLE_USERS),
        "toasts": len(SAMPLE_TOASTS),
    }


@pytest.mark.asyncio
async def test_seed_writes_users_before_toasts():
    executor = ScriptedExecutor()

    await seed(executor)

    tables = ["users" if "INTO users" in sql else "toasts" for sql in executor.sql]
    assert tables == ["users"] * len(SAMPLE_USERS) + ["toasts"] * len(SAMPLE_TOASTS)


@pytest.mark.asyncio
async def test_seed_clear_seed_matches_single_seed(local_db):
    await seed(local_db)
    once = await table_counts(local_db)

    await clear_tables(local_db)
    assert await table_counts(local_db) == {"users": 0, "toasts": 0}

    await seed(local_db)
    await seed(local_db)
    assert await table_counts(local_db) == once


@pytest.mark.asyncio
async def test_seed_failure_is_collected_per_row(local_db):
    toasts = SAMPLE_TOASTS + [
        {"toastID": "bad-toast", "toasterID": "ghost", "toastieID": "ghost"}
    ]

    report = await seed(local_db, toasts=toasts)

    assert [i.label for i in report.failed] == ["toast:bad-toast"]
    assert len(report.succeeded) == len(SAMPLE_USERS) + len(SAMPLE_TOASTS)
    assert (await table_counts(local_db))["toasts"] == len(SAMPLE_TOASTS)


@pytest.mark.asyncio
async def test_seed_keeps_going_when_remote_is_down():
    executor = ScriptedExecutor({"INSERT": TransportError("HTTP error! status: 503", status=503)})

    report = await seed(executor)

    # Every row was attempted even though every row failed
    assert len(executor.calls) == len(SAMPLE_USERS) + len(SAMPLE_TOASTS)
    assert len(report.failed) == len(executor.calls)
    assert report.summary()["failed"][0]["error"] == "HTTP error! status: 503"


@pytest.mark.asyncio
async def test_seed_summary(local_db):
    await seed(local_db)

    summary = await seed_summary(local_db)

    assert summary["counts"] == {"users": 4, "toasts": 4}
    assert len(summary["sample_users"]) == 3
    assert {"toasterName", "toastieName", "toastTime"} <= set(summary["sample_toasts"][0])


# =========================
# CLEAR
# =========================
@pytest.mark.asyncio
async def test_clear_deletes_toasts_before_users():
    executor = ScriptedExecutor()

    report = await clear_tables(executor)

    assert executor.sql == ["DELETE FROM toasts", "DELETE FROM users"]
    assert report.ok


@pytest.mark.asyncio
async def test_clear_remote_requires_confirmation():
    executor = ScriptedExecutor()

    with pytest.raises(ConfigError):
        await clear_remote(executor, None)
    with pytest.raises(ConfigError):
        await clear_remote(executor, "confirm")

    assert executor.calls == []


@pytest.mark.asyncio
async def test_clear_remote_with_confirmation(remote_db):
    await seed(remote_db)

    report = await clear_remote(remote_db, "--confirm")

    assert report.ok
    assert await table_counts(remote_db) == {"users": 0, "toasts": 0}


@pytest.mark.asyncio
async def test_table_counts_missing_table():
    executor = ScriptedExecutor({"FROM toasts": DatabaseError("no such table: toasts")})

    counts = await table_counts(executor)

    assert counts == {"users": 0, "toasts": None}


# =========================
# SYNC / SETUP
# =========================
@pytest.mark.asyncio
async def test_sync_makes_local_equal_remote(remote_db, local_db):
    await seed(remote_db)
    # Local has rows that don't exist remotely, they must disappear
    await local_db.query(
        "INSERT INTO users (userID, name) VALUES (?, ?)", ["local-only", "Eve"]
    )
    await local_db.query(
        "INSERT INTO toasts (toastID, toasterID, toastieID) VALUES (?, ?, ?)",
        ["local-toast", "local-only", "local-only"],
    )

    report = await sync(remote_db, local_db)

    assert report.ok
    assert await all_rows(local_db) == await all_rows(remote_db)


@pytest.mark.asyncio
async def test_sync_empty_remote_empties_local(remote_db, local_db):
    await seed(local_db)

    await sync(remote_db, local_db)

    assert await table_counts(local_db) == {"users": 0, "toasts": 0}


@pytest.mark.asyncio
async def test_sync_fails_before_touching_local_when_remote_unreadable(local_db):
    await seed(local_db)
    remote = ScriptedExecutor({"SELECT": TransportError("HTTP error! status: 403", status=403)})

    with pytest.raises(TransportError):
        await sync(remote, local_db)

    assert await table_counts(local_db) == {"users": 4, "toasts": 4}


@pytest.mark.asyncio
async def test_setup_local_rebuilds_from_remote(remote_db, local_db):
    await seed(remote_db)
    await local_db.query(
        "INSERT INTO users (userID, name) VALUES (?, ?)", ["stale", "Old"]
    )

    report = await setup_local(remote_db, local_db, MIGRATIONS_DIR)

    assert report.ok
    assert await all_rows(local_db) == await all_rows(remote_db)


@pytest.mark.asyncio
async def test_setup_local_records_wipe_failure_and_continues(remote_db, local_db):
    await seed(remote_db)

    async def failing_wipe():
        raise SubprocessError("Could not remove local D1 state: Permission denied")

    local_db.wipe = failing_wipe

    report = await setup_local(remote_db, local_db, MIGRATIONS_DIR)

    wipe = report.find("wipe")
    assert wipe is not None and not wipe.ok
    assert "Permission denied" in wipe.outcome.message
    assert await all_rows(local_db) == await all_rows(remote_db)


@pytest.mark.asyncio
async def test_check_connection(remote_db):
    await seed(remote_db)

    result = await check_connection(remote_db)

    assert result == {"tables": ["toasts", "users"], "counts": {"users": 4, "toasts": 4}}
