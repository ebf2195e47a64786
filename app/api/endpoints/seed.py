import logging
from typing import Annotated
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select

from app.core import schemas, models
from app.core.database import get_db
from app.core.sample_data import SAMPLE_TOASTS, SAMPLE_USERS

router = APIRouter(prefix="/api", tags=["Seed"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


# Seed the database with the sample data (safe to call twice)
@router.post(
    "/seed", response_model=schemas.SeedResponse, status_code=status.HTTP_201_CREATED
)
async def seed_database(db: db_dep):
    try:
        # Users first, toasts reference them
        await db.execute(
            sqlite_insert(models.User.__table__)
            .values(SAMPLE_USERS)
            .on_conflict_do_nothing()
        )
        await db.execute(
            sqlite_insert(models.Toast.__table__)
            .values(SAMPLE_TOASTS)
            .on_conflict_do_nothing()
        )
        await db.commit()
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Seeding error: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to seed database",
        )

    users = await db.execute(
        select(models.User).where(
            models.User.user_id.in_([u["userID"] for u in SAMPLE_USERS])
        )
    )
    toasts = await db.execute(
        select(models.Toast).where(
            models.Toast.toast_id.in_([t["toastID"] for t in SAMPLE_TOASTS])
        )
    )

    return schemas.SeedResponse(
        message="Database seeded successfully!",
        users=[schemas.UserResponse.model_validate(u) for u in users.scalars()],
        toasts=[schemas.ToastResponse.model_validate(t) for t in toasts.scalars()],
    )


# Clear all data
@router.delete("/clear")
async def clear_database(db: db_dep):
    try:
        # Delete in correct order (toasts first due to foreign keys)
        await db.execute(delete(models.Toast))
        await db.execute(delete(models.User))
        await db.commit()
        return {"message": "Database cleared successfully!"}
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Failed to clear database: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear database",
        )
