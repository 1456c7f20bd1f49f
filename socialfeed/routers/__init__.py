"""Aggregate router exports."""
from .auth import router as auth_router
from .messages import router as messages_router
from .posts import business_router, posts_router
from .profiles import router as profiles_router
from .system import router as system_router

__all__ = [
    "auth_router",
    "business_router",
    "messages_router",
    "posts_router",
    "profiles_router",
    "system_router",
]
