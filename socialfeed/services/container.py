"""Wiring of the long-lived service instances for one application."""
from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..database import Database
from .identity_service import IdentityStore
from .media_service import MediaHost, MediaStore
from .message_service import DirectMessageLog
from .post_service import PostAggregate
from .session_service import SessionManager


@dataclass
class ServiceContainer:
    settings: Settings
    database: Database
    identity: IdentityStore
    sessions: SessionManager
    media: MediaStore
    posts: PostAggregate
    messages: DirectMessageLog


def build_services(settings: Settings, database: Database, media_host: MediaHost) -> ServiceContainer:
    factory = database.session_factory
    identity = IdentityStore(factory)
    return ServiceContainer(
        settings=settings,
        database=database,
        identity=identity,
        sessions=SessionManager(factory, identity, ttl=settings.session_ttl),
        media=MediaStore(factory, media_host),
        posts=PostAggregate(factory),
        messages=DirectMessageLog(factory, identity),
    )


__all__ = ["ServiceContainer", "build_services"]
