# backend/app/models/platform.py
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from backend.app.db.base import Base


class Platform(Base):
    __tablename__ = "platforms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Display name only ("GitHub", "Google", ...)
    name = Column(String(100), unique=True, index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )
