import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, JSON

from core.database import Base


ALL_PERMISSIONS = (
    "dashboard",
    "addBooking",
    "entries",
    "completedFiles",
    "master",
    "manageMaster",
    "bookingRequest",
    "locals",
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)  # type: ignore
    username = Column(String(64), unique=True, index=True, nullable=False)  # type: ignore
    hashed_password = Column(String, nullable=False)  # type: ignore
    role = Column(String(16), nullable=False, default="user")  # type: ignore  # admin or user
    permissions = Column(JSON, nullable=False, default=list)  # type: ignore
    active = Column(Boolean, nullable=False, default=False)  # type: ignore  # signed-in presence
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)  # type: ignore
    last_login_at = Column(DateTime(timezone=True), nullable=True)  # type: ignore
