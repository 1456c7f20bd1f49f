"""Periodic purge of expired login sessions."""
from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from .session_service import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL: timedelta = timedelta(hours=1)


class CleanupError(RuntimeError):
    """Raised when the cleanup task cannot complete successfully."""


def run_cleanup(sessions: SessionManager) -> int:
    """Delete expired sessions and return how many were removed."""

    try:
        removed = sessions.purge_expired()
    except SQLAlchemyError as exc:
        logger.exception("Session cleanup failed")
        raise CleanupError("session cleanup failed") from exc
    logger.info("Cleanup finished (expired_sessions=%d)", removed)
    return removed


class CleanupWorker:
    """Background task that runs :func:`run_cleanup` on a fixed interval."""

    def __init__(self, sessions: SessionManager, *, interval: timedelta = DEFAULT_INTERVAL) -> None:
        self._sessions = sessions
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        self._stop = asyncio.Event()

    async def run_once(self) -> None:
        try:
            await asyncio.to_thread(run_cleanup, self._sessions)
        except CleanupError:
            logger.exception("Scheduled cleanup failed")
        except Exception:
            logger.exception("Unexpected error during cleanup run")

    async def _loop(self) -> None:
        while not self._stop.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval.total_seconds())
            except asyncio.TimeoutError:
                continue

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._stop.clear()
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None


__all__ = ["CleanupError", "CleanupWorker", "run_cleanup"]
