"""SQLAlchemy ORM model for uploaded media metadata."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from socialfeed.database import Base
from .base import CreatedAtMixin


class MediaAsset(CreatedAtMixin, Base):
    __tablename__ = "media_assets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    owner_username = Column(String(150), nullable=False)
    key = Column(String(1024), nullable=False, unique=True)
    url = Column(String(2048), nullable=False)
    content_type = Column(String(255), nullable=False)
    folder = Column(String(255), nullable=True)

    owner = relationship("User", back_populates="media_assets")
    posts = relationship("Post", back_populates="media_asset")


__all__ = ["MediaAsset"]
