from sqlalchemy import Column, ForeignKey, String, text
from sqlalchemy.orm import relationship

from app.core.database import Base


# =========================
# User
# =========================
class User(Base):
    __tablename__ = "users"

    # UUID stored as text, column names match the D1 schema
    user_id = Column("userID", String, primary_key=True)
    name = Column("name", String, nullable=False)

    # Relationships
    sent_toasts = relationship(
        "Toast",
        back_populates="toaster",
        foreign_keys="Toast.toaster_id",
    )

    received_toasts = relationship(
        "Toast",
        back_populates="toastie",
        foreign_keys="Toast.toastie_id",
    )


# =========================
# Toast
# =========================
class Toast(Base):
    """
    A directed "cheers" from one user to another:
    - toaster: who sends it
    - toastie: who receives it
    """

    __tablename__ = "toasts"

    toast_id = Column("toastID", String, primary_key=True)

    toaster_id = Column(
        "toasterID",
        String,
        ForeignKey("users.userID"),
        nullable=False,
    )

    toastie_id = Column(
        "toastieID",
        String,
        ForeignKey("users.userID"),
        nullable=False,
    )

    # ISO-ish text ("YYYY-MM-DD HH:MM:SS"), same as D1 stores it
    toast_time = Column(
        "toastTime",
        String,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Relationships
    toaster = relationship(
        "User", back_populates="sent_toasts", foreign_keys=[toaster_id]
    )
    toastie = relationship(
        "User", back_populates="received_toasts", foreign_keys=[toastie_id]
    )
