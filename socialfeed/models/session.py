"""SQLAlchemy ORM model for server-side login sessions."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from socialfeed.database import Base
from .base import CreatedAtMixin


class UserSession(CreatedAtMixin, Base):
    """Opaque cookie token mapped to a snapshot of the user's identity."""

    __tablename__ = "user_sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    username = Column(String(150), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="sessions")


__all__ = ["UserSession"]
