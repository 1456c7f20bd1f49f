"""SQLAlchemy ORM model for application users."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from socialfeed.database import Base
from .base import CreatedAtMixin


class User(CreatedAtMixin, Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    email = Column(String(255), nullable=True)
    profile_pic_url = Column(String(2048), nullable=True)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    media_assets = relationship("MediaAsset", back_populates="owner")


__all__ = ["User"]
