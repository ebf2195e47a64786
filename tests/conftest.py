import uuid
from pathlib import Path

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core import models
from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.core.d1.local import SqlAlchemyExecutor
from app.core.d1.migrations import MigrationApplier

# Every test gets its own in-memory database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def make_engine():
    # StaticPool: all sessions share the one in-memory connection
    return enable_sqlite_foreign_keys(
        create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    )


# Create the tables for the API tests and drop everything afterwards
@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


# Create session and rollback once it is done
@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    TestingSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()
        await session.close()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# User
@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession):
    # Unique id for each test to avoid duplicates
    user = models.User(user_id=f"user-{uuid.uuid4().hex[:8]}", name="Alice")

    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


# Second user, somebody to toast
@pytest_asyncio.fixture(scope="function")
async def other_user(db_session: AsyncSession):
    user = models.User(user_id=f"user-{uuid.uuid4().hex[:8]}", name="Bob")

    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


# Executors over fresh databases with the real migrations applied.
# "remote_db" stands in for D1, "local_db" for the developer copy.
async def _migrated_executor():
    executor = SqlAlchemyExecutor(make_engine())
    await MigrationApplier(executor).apply_directory(MIGRATIONS_DIR)
    return executor


@pytest_asyncio.fixture(scope="function")
async def local_db():
    executor = await _migrated_executor()
    yield executor
    await executor.close()


@pytest_asyncio.fixture(scope="function")
async def remote_db():
    executor = await _migrated_executor()
    yield executor
    await executor.close()
