"""Database layer utilities for SQLAlchemy-backed persistence."""
from __future__ import annotations

from typing import Callable

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()

SessionFactory = Callable[[], Session]


class Database:
    """Own the engine and session factory for one running application."""

    def __init__(self, database_url: str) -> None:
        self.engine: Engine = create_engine(database_url, pool_pre_ping=True, future=True)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            future=True,
            expire_on_commit=False,
        )

    def create_session(self) -> Session:
        """Return a new SQLAlchemy session for services, background tasks or scripts."""
        return self.session_factory()

    def init_db(self) -> None:
        """Initialise database schema by creating tables when missing."""
        # Import models to ensure they are registered on the metadata before create_all runs.
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Base", "Database", "SessionFactory"]
