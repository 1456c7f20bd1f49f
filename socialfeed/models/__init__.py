"""Convenience exports for ORM models."""
from .media import MediaAsset
from .message import DirectMessage
from .post import Post, PostComment
from .session import UserSession
from .user import User

__all__ = [
    "DirectMessage",
    "MediaAsset",
    "Post",
    "PostComment",
    "User",
    "UserSession",
]
