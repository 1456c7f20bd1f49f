"""User records and password verification backed by SQLAlchemy."""
from __future__ import annotations

import logging
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..database import SessionFactory
from ..errors import InvalidInput, NotFound, UpstreamFailure, UsernameTaken
from ..models import User

logger = logging.getLogger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify that ``password`` matches ``hashed_password``."""

    try:
        return _pwd_context.verify(password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def normalize_username(username: str | None) -> str:
    """Usernames are stored and looked up without surrounding whitespace."""

    return (username or "").strip()


def has_password(password: str | None) -> bool:
    """Whitespace-only passwords count as missing; others are hashed verbatim."""

    return bool(password and password.strip())


class IdentityStore:
    """Create, look up and authenticate users."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def create_user(
        self,
        username: str | None,
        password: str | None,
        *,
        phone: str | None = None,
        email: str | None = None,
    ) -> User:
        """Persist a new user; a taken username fails and never overwrites."""

        username = normalize_username(username)
        if not username or not has_password(password):
            raise InvalidInput("Missing fields")

        with self._session_factory() as db:
            existing = db.scalar(select(User.id).where(User.username == username))
            if existing is not None:
                raise UsernameTaken()

            user = User(
                username=username,
                hashed_password=hash_password(password),
                phone=_optional_text(phone),
                email=_optional_text(email),
            )
            db.add(user)
            try:
                db.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent signup for the same name.
                db.rollback()
                raise UsernameTaken() from exc
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to register user")
                raise UpstreamFailure("Signup failed") from exc

            db.refresh(user)
            logger.info("Registered user %s", user.username)
            return user

    def get_by_username(self, username: str) -> User | None:
        with self._session_factory() as db:
            return db.scalar(select(User).where(User.username == username))

    def verify_credentials(self, username: str | None, password: str | None) -> User | None:
        """Return the user when ``password`` matches, ``None`` otherwise."""

        username = normalize_username(username)
        if not username or not has_password(password):
            return None
        user = self.get_by_username(username)
        if user is None:
            # Spend the same bcrypt time so unknown usernames are not observable.
            _pwd_context.dummy_verify()
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def get_profile(self, username: str) -> User:
        user = self.get_by_username(username)
        if user is None:
            raise NotFound("User not found")
        return user

    def set_profile_picture(self, user_id: UUID, url: str) -> User:
        with self._session_factory() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFound("User not found")
            user.profile_pic_url = url
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to update profile picture for %s", user_id)
                raise UpstreamFailure("Failed to update profile picture") from exc
            db.refresh(user)
            return user


__all__ = ["IdentityStore", "has_password", "hash_password", "normalize_username", "verify_password"]
