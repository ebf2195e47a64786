import logging
import uuid
from typing import Annotated, List
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import desc, select

from app.core import schemas, models
from app.core.database import get_db

router = APIRouter(prefix="/api/toasts", tags=["Toasts"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


# Get all toasts
@router.get("", response_model=List[schemas.ToastResponse])
async def list_toasts(db: db_dep):
    query = select(models.Toast).order_by(desc(models.Toast.toast_time))
    result = await db.execute(query)
    return result.scalars().all()


# Send a toast
@router.post(
    "",
    response_model=schemas.ToastResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_toast(toast: schemas.ToastCreate, db: db_dep):
    if toast.toaster_id == toast.toastie_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot toast yourself",
        )

    # Both users are checked in a single round trip
    query = select(models.User.user_id).where(
        models.User.user_id.in_([toast.toaster_id, toast.toastie_id])
    )
    result = await db.execute(query)
    found = set(result.scalars().all())
    missing = [
        user_id
        for user_id in (toast.toaster_id, toast.toastie_id)
        if user_id not in found
    ]

    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {', '.join(missing)}",
        )

    if toast.toast_id and await db.get(models.Toast, toast.toast_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Toast already exists"
        )

    try:
        new_toast = models.Toast(
            toast_id=toast.toast_id or str(uuid.uuid4()),
            toaster_id=toast.toaster_id,
            toastie_id=toast.toastie_id,
        )
        db.add(new_toast)
        await db.commit()
        # toastTime is filled in by the database
        await db.refresh(new_toast)
        return new_toast
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Failed to create toast: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create toast",
        )


# Get toasts for a specific user (as toaster or toastie)
@router.get("/user/{user_id}", response_model=schemas.UserToastsResponse)
async def get_user_toasts(user_id: str, db: db_dep):
    sent = await db.execute(
        select(models.Toast).where(models.Toast.toaster_id == user_id)
    )
    received = await db.execute(
        select(models.Toast).where(models.Toast.toastie_id == user_id)
    )
    return {
        "sent": sent.scalars().all(),
        "received": received.scalars().all(),
    }


# Toasts of a user with the other side's name resolved
@router.get("/my-toasts/{user_id}", response_model=schemas.MyToastsResponse)
async def get_my_toasts(user_id: str, db: db_dep):
    db_user = await db.get(models.User, user_id)

    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    sent_query = (
        select(models.Toast, models.User.name)
        .join(models.User, models.Toast.toastie_id == models.User.user_id)
        .where(models.Toast.toaster_id == user_id)
        .order_by(desc(models.Toast.toast_time))
    )
    received_query = (
        select(models.Toast, models.User.name)
        .join(models.User, models.Toast.toaster_id == models.User.user_id)
        .where(models.Toast.toastie_id == user_id)
        .order_by(desc(models.Toast.toast_time))
    )

    sent_rows = (await db.execute(sent_query)).all()
    received_rows = (await db.execute(received_query)).all()

    sent = [
        schemas.SentToast(
            toast_id=toast.toast_id,
            toastie_id=toast.toastie_id,
            toastie_name=name,
            toast_time=toast.toast_time,
        )
        for toast, name in sent_rows
    ]
    received = [
        schemas.ReceivedToast(
            toast_id=toast.toast_id,
            toaster_id=toast.toaster_id,
            toaster_name=name,
            toast_time=toast.toast_time,
        )
        for toast, name in received_rows
    ]

    return schemas.MyToastsResponse(
        user_id=user_id,
        sent=sent,
        received=received,
        sent_count=len(sent),
        received_count=len(received),
    )
