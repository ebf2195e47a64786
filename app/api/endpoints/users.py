import logging
from typing import Annotated, List
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core import schemas, models
from app.core.database import get_db

router = APIRouter(prefix="/api/users", tags=["Users"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


# Get all users
@router.get("", response_model=List[schemas.UserResponse])
async def list_users(db: db_dep):
    result = await db.execute(select(models.User).order_by(models.User.name))
    return result.scalars().all()


# Add user
@router.post(
    "",
    response_model=schemas.UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(user: schemas.UserCreate, db: db_dep):
    # Validate whether a user already exists
    db_user = await db.get(models.User, user.user_id)

    if db_user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="User already exists"
        )

    try:
        new_user = models.User(user_id=user.user_id, name=user.name)
        db.add(new_user)
        await db.commit()
        await db.refresh(new_user)
        return new_user
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Failed to add a new user: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        )


# Get user
@router.get("/{user_id}", response_model=schemas.UserResponse)
async def get_user(user_id: str, db: db_dep):
    db_user = await db.get(models.User, user_id)

    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    return db_user
