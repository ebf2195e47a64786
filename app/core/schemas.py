from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Wire format is camelCase (userID, toasterID, ...), python side is snake_case
class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# =========================
# USER
# =========================
class UserBase(CamelModel):
    name: str = Field(min_length=1, max_length=120)


class UserCreate(UserBase):
    user_id: str = Field(alias="userID", min_length=1)


class UserResponse(UserBase):
    user_id: str = Field(alias="userID")


# =========================
# TOAST
# =========================
class ToastCreate(CamelModel):
    # Generated server side when missing
    toast_id: Optional[str] = Field(default=None, alias="toastID", min_length=1)
    toaster_id: str = Field(alias="toasterID", min_length=1)
    toastie_id: str = Field(alias="toastieID", min_length=1)


class ToastResponse(CamelModel):
    toast_id: str = Field(alias="toastID")
    toaster_id: str = Field(alias="toasterID")
    toastie_id: str = Field(alias="toastieID")
    toast_time: str = Field(alias="toastTime")


class UserToastsResponse(BaseModel):
    sent: List[ToastResponse] = []
    received: List[ToastResponse] = []


class SentToast(CamelModel):
    toast_id: str = Field(alias="toastID")
    toastie_id: str = Field(alias="toastieID")
    toastie_name: str = Field(alias="toastieName")
    toast_time: str = Field(alias="toastTime")


class ReceivedToast(CamelModel):
    toast_id: str = Field(alias="toastID")
    toaster_id: str = Field(alias="toasterID")
    toaster_name: str = Field(alias="toasterName")
    toast_time: str = Field(alias="toastTime")


class MyToastsResponse(CamelModel):
    user_id: str = Field(alias="userID")
    sent: List[SentToast] = []
    received: List[ReceivedToast] = []
    sent_count: int = Field(alias="sentCount")
    received_count: int = Field(alias="receivedCount")


# =========================
# SEED
# =========================
class SeedResponse(BaseModel):
    message: str
    users: List[UserResponse] = []
    toasts: List[ToastResponse] = []

