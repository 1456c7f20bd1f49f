"""Expired session cleanup."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from socialfeed.models import UserSession
from socialfeed.services import CleanupError, CleanupWorker, run_cleanup


def test_cleanup_only_removes_expired_sessions(services):
    _, stale = services.sessions.signup("alice", "pw123")
    _, live = services.sessions.signup("bob", "pw123")
    with services.database.create_session() as db:
        db.execute(
            update(UserSession)
            .where(UserSession.token == stale)
            .values(expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))
        )
        db.commit()

    assert run_cleanup(services.sessions) == 1
    assert services.sessions.check(live).username == "bob"
    assert run_cleanup(services.sessions) == 0


def test_cleanup_wraps_database_errors(services, monkeypatch):
    def _broken():
        raise OperationalError("DELETE", {}, Exception("database is locked"))

    monkeypatch.setattr(services.sessions, "purge_expired", _broken)

    with pytest.raises(CleanupError):
        run_cleanup(services.sessions)


def test_worker_runs_immediately_and_stops(services):
    _, token = services.sessions.signup("alice", "pw123")
    with services.database.create_session() as db:
        db.execute(update(UserSession).values(expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)))
        db.commit()

    def _session_exists() -> bool:
        with services.database.create_session() as db:
            return db.get(UserSession, token) is not None

    async def _exercise() -> None:
        worker = CleanupWorker(services.sessions, interval=timedelta(hours=1))
        worker.start()
        for _ in range(200):
            await asyncio.sleep(0.01)
            if not _session_exists():
                break
        await worker.stop()

    asyncio.run(_exercise())

    assert not _session_exists()


def test_worker_survives_failed_runs(services, monkeypatch):
    def _broken():
        raise OperationalError("DELETE", {}, Exception("database is locked"))

    monkeypatch.setattr(services.sessions, "purge_expired", _broken)

    asyncio.run(CleanupWorker(services.sessions).run_once())


def test_worker_keeps_running_after_unexpected_errors(services, monkeypatch):
    calls: list[int] = []

    def _unexpected():
        calls.append(1)
        raise RuntimeError("boom")

    monkeypatch.setattr(services.sessions, "purge_expired", _unexpected)

    async def _exercise() -> None:
        worker = CleanupWorker(services.sessions, interval=timedelta(milliseconds=10))
        worker.start()
        for _ in range(200):
            await asyncio.sleep(0.01)
            if len(calls) >= 3:
                break
        await worker.stop()

    asyncio.run(_exercise())

    assert len(calls) >= 3
