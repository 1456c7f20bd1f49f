"""Server-side session store mapping opaque cookie tokens to identity claims."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from ..database import SessionFactory
from ..errors import InvalidCredentials, InvalidInput, UpstreamFailure
from ..models import User, UserSession
from .identity_service import IdentityStore, has_password, normalize_username

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=14)


@dataclass(frozen=True, slots=True)
class SessionClaim:
    """Snapshot of who a session belongs to, taken when it was issued."""

    username: str
    user_id: UUID


class SessionManager:
    """Issue, resolve and destroy login sessions."""

    def __init__(
        self,
        session_factory: SessionFactory,
        identity: IdentityStore,
        *,
        ttl: timedelta = DEFAULT_SESSION_TTL,
    ) -> None:
        self._session_factory = session_factory
        self._identity = identity
        self.ttl = ttl

    def signup(
        self,
        username: str | None,
        password: str | None,
        *,
        phone: str | None = None,
        email: str | None = None,
    ) -> tuple[SessionClaim, str]:
        """Register a user and log them straight in, returning the claim and its token."""

        user = self._identity.create_user(username, password, phone=phone, email=email)
        return self._issue(user)

    def login(self, username: str | None, password: str | None) -> tuple[SessionClaim, str]:
        username = normalize_username(username)
        if not username or not has_password(password):
            raise InvalidInput("Missing fields")
        user = self._identity.verify_credentials(username, password)
        if user is None:
            logger.info("Rejected login attempt for %r", username)
            raise InvalidCredentials()
        return self._issue(user)

    def check(self, token: str | None) -> SessionClaim | None:
        """Resolve ``token`` to its claim; expired or unknown tokens give ``None``."""

        if not token:
            return None
        now = datetime.now(timezone.utc)
        with self._session_factory() as db:
            row = db.execute(
                select(UserSession.username, UserSession.user_id).where(
                    UserSession.token == token,
                    UserSession.expires_at > now,
                )
            ).first()
        if row is None:
            return None
        return SessionClaim(username=row.username, user_id=row.user_id)

    def refresh(self, token: str) -> bool:
        """Push the expiry of a live session forward by one TTL."""

        now = datetime.now(timezone.utc)
        stmt = (
            update(UserSession)
            .where(UserSession.token == token, UserSession.expires_at > now)
            .values(expires_at=now + self.ttl)
            .execution_options(synchronize_session=False)
        )
        with self._session_factory() as db:
            try:
                result = db.execute(stmt)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                logger.warning("Failed to refresh session expiry", exc_info=True)
                return False
        return bool(result.rowcount)

    def logout(self, token: str | None) -> None:
        """Destroy the session for ``token``; unknown tokens are not an error."""

        if not token:
            return
        with self._session_factory() as db:
            try:
                db.execute(delete(UserSession).where(UserSession.token == token))
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to destroy session")
                raise UpstreamFailure("Logout failed") from exc

    def purge_expired(self) -> int:
        now = datetime.now(timezone.utc)
        with self._session_factory() as db:
            result = db.execute(delete(UserSession).where(UserSession.expires_at <= now))
            db.commit()
        return int(result.rowcount or 0)

    def _issue(self, user: User) -> tuple[SessionClaim, str]:
        token = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        record = UserSession(
            token=token,
            user_id=user.id,
            username=user.username,
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._session_factory() as db:
            db.add(record)
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to persist session for %s", user.username)
                raise UpstreamFailure("Unable to start session") from exc
        return SessionClaim(username=user.username, user_id=user.id), token


__all__ = ["DEFAULT_SESSION_TTL", "SessionClaim", "SessionManager"]
