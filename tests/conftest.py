"""Shared fixtures: a throwaway SQLite database per test and an in-memory media host."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from feed_helpers import FakeMediaHost
from socialfeed.config import Settings
from socialfeed.database import Database
from socialfeed.main import create_app
from socialfeed.services import ServiceContainer, build_services


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+pysqlite:///{tmp_path / 'socialfeed.db'}",
        SESSION_COOKIE_SECURE=False,
        SESSION_COOKIE_SAMESITE="lax",
        DISABLE_CLEANUP=True,
    )


@pytest.fixture
def media_host() -> FakeMediaHost:
    return FakeMediaHost()


@pytest.fixture
def services(settings: Settings, media_host: FakeMediaHost) -> Iterator[ServiceContainer]:
    """Services wired against a fresh schema, without the HTTP layer."""

    database = Database(settings.database_url)
    database.init_db()
    yield build_services(settings, database, media_host)
    database.dispose()


@pytest.fixture
def client_factory(settings: Settings, media_host: FakeMediaHost) -> Iterator[Callable[[], TestClient]]:
    """Build clients that share one app (and database) but keep separate cookie jars."""

    app = create_app(settings, media_host=media_host)
    clients: list[TestClient] = []

    def _factory() -> TestClient:
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(client_factory: Callable[[], TestClient]) -> TestClient:
    return client_factory()
