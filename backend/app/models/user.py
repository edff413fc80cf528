# backend/app/models/user.py
import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from backend.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(50), unique=True, index=True, nullable=False)

    # bcrypt hash, login only
    hashed_password = Column(String(255), nullable=False)

    # Currently valid refresh token; NULL after logout
    refresh_token = Column(Text, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )
