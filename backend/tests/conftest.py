"""
Reprint Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure service unit tests
    ├── db_engine: in-memory SQLite engine with the schema created
    ├── db_session: AsyncSession bound to db_engine
    ├── credential_store: fresh StaticCredentialStore with one seeded user
    └── test_client: HTTPX AsyncClient whose DB sessions come from db_engine
"""

import os

# Override settings for testing BEFORE any reprint imports
# Why: Settings is instantiated at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum cost keeps hashing fast in tests
os.environ["AUTH_BACKEND"] = "static"
os.environ["AUTH_STATIC_USERS"] = "[]"
os.environ["CATALOG_UNIQUE_FIELDS"] = "isbn"

from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reprint.config import StaticUser
from reprint.database import Base, get_db_session
from reprint.models.book import Book  # noqa: F401
from reprint.models.user import User  # noqa: F401
from reprint.services.credential_store import StaticCredentialStore, hash_password

SEEDED_EMAIL = "admin@library.test"
SEEDED_PASSWORD = "correct horse battery staple"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_book(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = book
            result = await catalog_service.get_book(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_book_data():
    """Column values for a fully populated catalog entry."""
    now = datetime.now(timezone.utc)
    return {
        "id": 1,
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "publication_year": 1965,
        "publisher": "Chilton Books",
        "description": "Spice, sandworms, and succession.",
        "image_url": "https://covers.example/dune.jpg",
        "isbn": "9780441013593",
        "quantity": 4,
        "available_quantity": 2,
        "created_at": now,
        "updated_at": now,
    }


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite with the full schema.

    StaticPool keeps one connection alive so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def credential_store():
    """Static store seeded with one admin, isolated per test."""
    return StaticCredentialStore(
        [StaticUser(email=SEEDED_EMAIL, password_hash=hash_password(SEEDED_PASSWORD), role="admin")]
    )


@pytest_asyncio.fixture
async def test_client(db_engine, credential_store):
    """
    Provides an async HTTP test client for endpoint testing.

    Each request gets its own session on the shared in-memory engine, with
    the same commit/rollback behavior as the production dependency.
    """
    from reprint.main import app
    from reprint.services.credential_store import get_credential_store

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_credential_store():
        return credential_store

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_credential_store] = override_credential_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
