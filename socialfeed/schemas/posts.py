"""Pydantic schemas for posts, likes and comments."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..constants import PostPartition


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    author_username: str
    text: str
    created_at: datetime


class PostResponse(BaseModel):
    """Serialized representation of a persisted post."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    partition: PostPartition
    owner_username: str
    media_url: str
    media_type: str
    caption: str = ""
    like_count: int = 0
    comments: list[CommentResponse] = Field(default_factory=list)
    created_at: datetime


class UploadResponse(BaseModel):
    success: bool
    post: PostResponse | None = None
    message: str | None = None


class LikeResponse(BaseModel):
    success: bool
    likes: int


class CommentCreate(BaseModel):
    text: str | None = Field(default=None, max_length=2000)


class CommentsResponse(BaseModel):
    success: bool
    comments: list[CommentResponse]
