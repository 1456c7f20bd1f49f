"""Direct message log: append-only history between two users."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError

from ..database import SessionFactory
from ..errors import EmptyMessage, Forbidden, InvalidInput, NotAuthenticated, NotFound, UpstreamFailure
from ..models import DirectMessage
from ..models.base import as_utc
from .identity_service import IdentityStore
from .session_service import SessionClaim

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MessageRecord:
    from_username: str
    to_username: str
    text: str
    timestamp: datetime


def _to_message_record(message: DirectMessage) -> MessageRecord:
    return MessageRecord(
        from_username=message.from_username,
        to_username=message.to_username,
        text=message.text,
        timestamp=as_utc(message.timestamp),
    )


class DirectMessageLog:
    def __init__(self, session_factory: SessionFactory, identity: IdentityStore) -> None:
        self._session_factory = session_factory
        self._identity = identity

    def send(self, claim: SessionClaim | None, to_username: str | None, text: str | None) -> MessageRecord:
        """Append a message from the session's user; the sender is never taken from input."""

        if claim is None:
            raise NotAuthenticated()
        body = (text or "").strip()
        if not body:
            raise EmptyMessage()
        recipient = (to_username or "").strip()
        if not recipient:
            raise InvalidInput("Recipient is required")
        if self._identity.get_by_username(recipient) is None:
            raise NotFound("User not found")

        message = DirectMessage(from_username=claim.username, to_username=recipient, text=body)
        with self._session_factory() as db:
            db.add(message)
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to store message from %s to %s", claim.username, recipient)
                raise UpstreamFailure("Failed to send message") from exc
            db.refresh(message)
            return _to_message_record(message)

    def history(self, user_a: str, user_b: str, *, viewer: SessionClaim | None = None) -> list[MessageRecord]:
        """Messages between ``user_a`` and ``user_b`` in both directions, oldest first.

        When ``viewer`` is given it must be one of the two participants.
        """

        if viewer is not None and viewer.username not in {user_a, user_b}:
            raise Forbidden("You can only read your own conversations")

        stmt = (
            select(DirectMessage)
            .where(
                or_(
                    and_(DirectMessage.from_username == user_a, DirectMessage.to_username == user_b),
                    and_(DirectMessage.from_username == user_b, DirectMessage.to_username == user_a),
                )
            )
            .order_by(DirectMessage.timestamp.asc(), DirectMessage.id.asc())
        )
        with self._session_factory() as db:
            return [_to_message_record(message) for message in db.scalars(stmt)]


__all__ = ["DirectMessageLog", "MessageRecord"]
