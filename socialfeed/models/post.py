"""SQLAlchemy ORM models for posts and their comments."""
from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from socialfeed.constants import PostPartition
from socialfeed.database import Base
from .base import CreatedAtMixin


class Post(CreatedAtMixin, Base):
    __tablename__ = "posts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    partition = Column(String(32), nullable=False, default=PostPartition.ORDINARY.value, index=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    owner_username = Column(String(150), nullable=False, index=True)
    media_asset_id = Column(UUID(as_uuid=True), ForeignKey("media_assets.id", ondelete="SET NULL"), nullable=True)
    media_url = Column(String(2048), nullable=False)
    media_type = Column(String(16), nullable=False)
    caption = Column(Text, nullable=False, default="")
    like_count = Column(Integer, nullable=False, default=0, server_default="0")

    media_asset = relationship("MediaAsset", back_populates="posts")
    comments = relationship("PostComment", back_populates="post", cascade="all, delete-orphan")

    __table_args__ = (CheckConstraint("like_count >= 0", name="ck_posts_like_count_non_negative"),)


class PostComment(CreatedAtMixin, Base):
    __tablename__ = "post_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_username = Column(String(150), nullable=False)
    text = Column(Text, nullable=False)

    post = relationship("Post", back_populates="comments")


__all__ = ["Post", "PostComment"]
