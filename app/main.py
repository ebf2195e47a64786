import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.router import api_router
from app.core.config import settings
from app.core.d1.errors import ExecutionError
from app.core.d1.local import SqlAlchemyExecutor
from app.core.d1.migrations import MigrationApplier
from app.core.database import engine, get_db

logger = logging.getLogger(__name__)


async def run_migrations():
    """Apply the SQL migrations to the local database"""
    applier = MigrationApplier(SqlAlchemyExecutor(engine))
    await applier.apply_directory(settings.MIGRATIONS_DIR)


# Close the engine once everything is done and close all the sessions
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Apply any pending migrations automatically when the app starts
    try:
        await run_migrations()
        logger.info("Migrations applied successfully (or already up-to-date)")
    except ExecutionError as e:
        logger.error(f"Migration error during startup: {e}")

    yield
    await engine.dispose()


app = FastAPI(title="Toast App API", lifespan=lifespan)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include the master router containing all our endpoints
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Hello! Toast App Backend is running."}


@app.get("/health")
async def health(db: Annotated[AsyncSession, Depends(get_db)]):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as error:
        logging.error(f"Health check failed: {error}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "timestamp": timestamp,
                "database": "unreachable",
                "error": str(error),
            },
        )
    return {"status": "healthy", "timestamp": timestamp, "database": "connected"}
