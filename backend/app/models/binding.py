# backend/app/models/binding.py
import uuid

from sqlalchemy import Column, String, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from backend.app.db.base import Base


class Binding(Base):
    """A user's enrollment of a TOTP secret for one account on one platform."""
    __tablename__ = "user_platforms"
    __table_args__ = (
        UniqueConstraint("user_id", "platform_id", "account_name", name="uq_user_platform_account"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    platform_id = Column(String(36), ForeignKey("platforms.id"), nullable=False)

    # Label shown in the UI, unique per (user, platform)
    account_name = Column(String(255), nullable=False)

    # nonce:ciphertext:tag hex blob, see security/cipher.py
    # Only the cipher reads or writes this column.
    encrypted_secret = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Loaded with every binding so responses can show the platform name
    platform = relationship("Platform", lazy="selectin")
