"""
NoteShelf Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh in-memory SQLite database (aiosqlite, StaticPool)
       with the schema created from Base.metadata, wrapped in the same
       Database handle the application uses.

Fixtures:
    ├── database:         Database handle over a fresh schema
    ├── broken_database:  Database handle with no tables (every query fails)
    ├── note_store:       NoteStore bound to `database`
    ├── test_client:      HTTPX AsyncClient talking to an app using `database`
    └── broken_client:    HTTPX AsyncClient talking to an app using `broken_database`
"""

import os

# Override settings BEFORE any app imports: app.config builds its singleton on import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from app.database import Database
from app.models.note import Note  # noqa: F401  (registers the table)
from app.services.note_store import NoteStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _make_database() -> Database:
    # StaticPool: one shared connection, so every session sees the same in-memory DB
    return Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest_asyncio.fixture
async def database():
    db = _make_database()
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def broken_database():
    """A handle whose schema was never created: every statement raises OperationalError."""
    db = _make_database()
    yield db
    await db.dispose()


@pytest.fixture
def note_store(database):
    return NoteStore(database)


def _transport_for(database: Database) -> ASGITransport:
    from app.main import create_app

    return ASGITransport(app=create_app(database=database))


@pytest_asyncio.fixture
async def test_client(database):
    """
    Async HTTP client routed straight into the app (no server).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=_transport_for(database), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def broken_client(broken_database):
    async with AsyncClient(transport=_transport_for(broken_database), base_url="http://test") as client:
        yield client
