"""
Pytest fixtures for the test database, HTTP client and authentication.

The app is pointed at a throwaway database (file-backed SQLite by default,
override with TEST_DATABASE_URL). Each test creates the tables through the
app's own one-shot initializer and drops them afterwards.
"""

import os

os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_protest_tracker.db")
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from datetime import date, time, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import AsyncGenerator  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from protest_tracker.core.security import create_access_token, hash_password  # noqa: E402
from protest_tracker.db import init_db  # noqa: E402
from protest_tracker.db.base import Base  # noqa: E402
from protest_tracker.db.session import SessionLocal, engine  # noqa: E402
from protest_tracker.main import app  # noqa: E402
from protest_tracker.models import Organizer, Protest  # noqa: E402

ORGANIZER_PASSWORD = "correct-horse-battery"


async def _drop_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def db_ready() -> AsyncGenerator[None, None]:
    """Fresh tables for every test, created by ensure_db_ready()."""
    init_db.reset_db_ready()
    await _drop_tables()
    await init_db.ensure_db_ready()

    yield

    await _drop_tables()
    init_db.reset_db_ready()
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_ready) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_organizer(name: str, email: str) -> Organizer:
    async with SessionLocal() as session:
        organizer = Organizer(
            name=name,
            email=email,
            password_hash=hash_password(ORGANIZER_PASSWORD),
            bio=f"{name} organizes community actions",
        )
        session.add(organizer)
        await session.commit()
        await session.refresh(organizer)
        return organizer


async def create_protest_row(organizer_id: int, **overrides) -> Protest:
    """Insert a protest directly, bypassing the API."""
    values = {
        "name": "Climate March",
        "cause": "Climate",
        "description": "March from the park to city hall",
        "location": "Central Park",
        "latitude": Decimal("40.7812000"),
        "longitude": Decimal("-73.9665000"),
        "date": date.today() + timedelta(days=14),
        "time": time(11, 0),
        "official_link": "https://example.com/climate-march",
        "tags": ["climate", "youth"],
        "likes": 0,
    }
    values.update(overrides)
    async with SessionLocal() as session:
        protest = Protest(organizer_id=organizer_id, **values)
        session.add(protest)
        await session.commit()
        await session.refresh(protest)
        return protest


async def fetch_protest(protest_id: int):
    async with SessionLocal() as session:
        return await session.get(Protest, protest_id)


@pytest_asyncio.fixture
async def organizer(db_ready) -> Organizer:
    return await _create_organizer("Alex Rivera", "alex@example.com")


@pytest_asyncio.fixture
async def other_organizer(db_ready) -> Organizer:
    return await _create_organizer("Blake Chen", "blake@example.com")


@pytest_asyncio.fixture
async def auth_headers(organizer: Organizer) -> dict:
    token = create_access_token(organizer.id, organizer.email)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def other_auth_headers(other_organizer: Organizer) -> dict:
    token = create_access_token(other_organizer.id, other_organizer.email)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def protest(organizer: Organizer) -> Protest:
    return await create_protest_row(organizer.id)


@pytest_asyncio.fixture
async def make_protest(db_ready):
    """Factory: insert a protest for an organizer with optional field overrides."""
    return create_protest_row


@pytest_asyncio.fixture
async def load_protest(db_ready):
    """Factory: read a protest row straight from the database."""
    return fetch_protest
