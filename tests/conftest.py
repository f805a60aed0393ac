"""
Notes API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the test suite.
How:   The NoteStore runs against a throwaway SQLite file (aiosqlite) so the
       real SQLAlchemy code paths execute without PostgreSQL. The HTTP client
       talks to the ASGI app in-process through httpx's ASGITransport.

Fixture Hierarchy:
    ├── fake_clock:     Deterministic clock, one second per reading
    ├── note_store:     Opened NoteStore with the notes table created
    ├── app:            FastAPI app with get_note_store overridden
    └── test_client:    HTTPX AsyncClient bound to `app`
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Must happen before notes_api.config is imported anywhere
os.environ["DATABASE_URI"] = "sqlite+aiosqlite:///./test-notes.db"
os.environ["LOG_LEVEL"] = "WARNING"

from notes_api.database import Base  # noqa: E402
from notes_api.dependencies import get_note_store  # noqa: E402
from notes_api.main import create_app  # noqa: E402
from notes_api.services.note_store import NoteStore  # noqa: E402


class FakeClock:
    """Returns a strictly increasing UTC time, one second per call."""

    def __init__(self, start: datetime = datetime(2026, 1, 15, 12, 0, 0, 250000, tzinfo=timezone.utc)):
        self.current = start
        self.calls = 0

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        self.calls += 1
        return now


@pytest.fixture
def sqlite_url(tmp_path):
    """URL of a fresh SQLite file, one per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest_asyncio.fixture
async def note_store(sqlite_url, fake_clock):
    """
    A NoteStore over an empty notes table.

    Usage:
        async def test_create(note_store):
            note = await note_store.create("title", "text")
    """
    store = NoteStore.from_url(sqlite_url, clock=fake_clock)
    async with store.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def app(note_store):
    """
    FastAPI app whose routes use `note_store`.

    ASGITransport does not run the lifespan, so the store is injected
    through dependency_overrides instead of app.state.
    """
    application = create_app()
    application.dependency_overrides[get_note_store] = lambda: note_store
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient for endpoint testing.

    raise_app_exceptions=False lets the catch-all 500 handler's response
    reach the test instead of re-raising the original exception.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
