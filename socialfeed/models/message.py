"""SQLAlchemy ORM model for direct messages."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from socialfeed.database import Base
from .base import utcnow


class DirectMessage(Base):
    """Append-only entry in a two-person conversation."""

    __tablename__ = "direct_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_username = Column(String(150), nullable=False)
    to_username = Column(String(150), nullable=False)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (Index("ix_direct_messages_pair", "from_username", "to_username"),)


__all__ = ["DirectMessage"]
