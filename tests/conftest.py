"""
Tynda Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests
    ├── test_settings:   Settings pointing at a throwaway SQLite file
    ├── database:        Database handle with the schema created
    ├── app:             FastAPI app built by create_app() around `database`
    ├── make_client:     Factory for independent HTTPX clients (own cookie jars)
    └── test_client:     One anonymous client

API tests log in through /api/auth/login, so every client carries a real
signed session cookie.
"""

import os
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Override settings for testing BEFORE any tynda imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./tynda_test.db"
os.environ["SESSION_SECRET"] = "test-session-secret-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from tynda.config import Settings
from tynda.database import Database
from tynda.main import create_app
from tynda.models.playlist import Playlist
from tynda.models.track import Track
from tynda.models.user import ROLE_ADMIN, ROLE_USER, User
from tynda.security import hash_password

SUPER_ADMIN_EMAIL = "admin@tynda.kz"
DEFAULT_PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_track(mock_db_session):
            mock_db_session.execute.return_value = make_result(one=track)
            result = await TrackService(mock_db_session).get_track(str(track.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


def make_result(one=None, many=None, row=None):
    """
    Build a MagicMock shaped like a SQLAlchemy Result.

    one:  returned by scalar_one_or_none() and scalars().first()
    many: returned by scalars().all() and all()
    row:  returned by one()
    """
    result = MagicMock()
    result.scalar_one_or_none.return_value = one
    result.scalars.return_value.first.return_value = one
    result.scalars.return_value.all.return_value = list(many or [])
    result.all.return_value = list(many or [])
    result.one.return_value = row
    return result


def make_track(**overrides) -> Track:
    now = datetime.now(timezone.utc)
    data = {
        "id": uuid4(),
        "title": "Shape of You",
        "artist": "Ed Sheeran",
        "album": "Divide",
        "duration_seconds": 233,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Track(**data)


def make_playlist(**overrides) -> Playlist:
    now = datetime.now(timezone.utc)
    data = {
        "id": uuid4(),
        "name": "Road Trip",
        "description": "",
        "cover_url": "",
        "user_id": uuid4(),
        "tracks": [],
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Playlist(**data)


def make_user(**overrides) -> User:
    now = datetime.now(timezone.utc)
    data = {
        "id": uuid4(),
        "username": "listener",
        "email": "listener@example.com",
        "password": hash_password(DEFAULT_PASSWORD, rounds=4),
        "role": ROLE_USER,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return User(**data)


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures (real app, temporary SQLite database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tynda.db'}",
        session_secret="test-session-secret-0123456789",
        super_admin_email=SUPER_ADMIN_EMAIL,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(database, test_settings):
    return create_app(database=database, app_settings=test_settings)


@pytest_asyncio.fixture
async def make_client(app):
    """
    Factory for HTTPX clients bound to the test app.

    Each client keeps its own cookie jar, so two clients logged in as
    different users act as two independent browsers.
    """
    clients = []

    def _make() -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def test_client(make_client):
    """An anonymous client (no session)."""
    return make_client()


async def create_user(
    database: Database,
    username: str,
    email: Optional[str] = None,
    role: str = ROLE_USER,
    password: str = DEFAULT_PASSWORD,
) -> User:
    """Insert a user directly into the store and return it."""
    now = datetime.now(timezone.utc)
    user = User(
        username=username,
        email=(email or f"{username}@example.com").lower(),
        password=hash_password(password, rounds=4),
        role=role,
        created_at=now,
        updated_at=now,
    )
    async with database.session() as session:
        session.add(user)
    return user


async def login(client: AsyncClient, user: User, password: str = DEFAULT_PASSWORD) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": user.email, "password": password}
    )
    assert response.status_code == 200, response.text


@pytest_asyncio.fixture
async def user_client(database, make_client):
    """Client logged in as a regular user; returns (client, user)."""
    user = await create_user(database, "alice")
    client = make_client()
    await login(client, user)
    return client, user


@pytest_asyncio.fixture
async def other_user_client(database, make_client):
    user = await create_user(database, "bob")
    client = make_client()
    await login(client, user)
    return client, user


@pytest_asyncio.fixture
async def admin_client(database, make_client):
    """Client logged in as an ordinary (not super) admin."""
    user = await create_user(database, "moderator", role=ROLE_ADMIN)
    client = make_client()
    await login(client, user)
    return client, user


@pytest_asyncio.fixture
async def super_admin_client(database, make_client):
    user = await create_user(database, "admin", email=SUPER_ADMIN_EMAIL, role=ROLE_ADMIN)
    client = make_client()
    await login(client, user)
    return client, user
