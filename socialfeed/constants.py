"""Project-wide constant values."""
from __future__ import annotations

import enum

ALLOWED_MEDIA_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".mp4", ".mov"})

POST_MEDIA_FOLDER = "uploads"
PROFILE_MEDIA_FOLDER = "profile-pics"


class PostPartition(str, enum.Enum):
    """Storage partition a post lives in; both share the same logic."""

    ORDINARY = "ordinary"
    BUSINESS = "business"


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


__all__ = [
    "ALLOWED_MEDIA_EXTENSIONS",
    "POST_MEDIA_FOLDER",
    "PROFILE_MEDIA_FOLDER",
    "PostPartition",
    "MediaType",
]
