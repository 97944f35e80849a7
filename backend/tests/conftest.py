"""
Bookshelf Backend: Test Configuration (conftest.py)
====================================================

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── db_engine:       Async SQLite engine with the books table created
    ├── db_session:      Session on db_engine for seeding/inspecting rows
    ├── seeded_book:     The reference book row, inserted before the test
    └── test_client:     HTTPX AsyncClient bound to the app, DB dependency overridden
"""

import os
import tempfile

# Settings are read at import time; point them at SQLite before any bookshelf import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="bookshelf_test_"), "health.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from bookshelf.database import Base, get_db_session
from bookshelf.models.book import Book

SEEDED_BOOK = {
    "isbn": "0691161518",
    "amazon_url": "http://a.co/eobPtX2",
    "author": "Matthew Lane",
    "language": "english",
    "pages": 264,
    "publisher": "Princeton University Press",
    "title": "Power-Up: Unlocking the Hidden Mathematics in Video Games",
    "year": 2017,
}

NEW_BOOK = {
    "isbn": "0691161519",
    "amazon_url": "https://www.amazon.com/Cracking-Coding-Interview-Programming-Questions/dp/0984782850",
    "author": "Gayle Laakmann McDowell",
    "language": "english",
    "pages": 687,
    "publisher": "CareerCup",
    "title": "Cracking the Coding Interview",
    "year": 2015,
}


@pytest.fixture
def seeded_row():
    """The reference book as the store returns it (no database involved)."""
    return dict(SEEDED_BOOK)


@pytest.fixture
def new_book():
    """A complete, valid create payload (fresh copy per test)."""
    return dict(NEW_BOOK)


@pytest.fixture
def update_payload():
    """A valid update payload: every field but isbn."""
    return {key: value for key, value in NEW_BOOK.items() if key != "isbn"}


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.mappings.return_value.all.return_value = [row]
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A throwaway SQLite database per test; NullPool keeps connections loop-local."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'books.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_book(session_factory):
    """Inserts the reference book (isbn 0691161518) and returns its fields."""
    async with session_factory() as session:
        await session.execute(insert(Book.__table__).values(**SEEDED_BOOK))
        await session.commit()
    return dict(SEEDED_BOOK)


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    get_db_session is replaced with one bound to the per-test database,
    keeping the commit/rollback behaviour of the real dependency.
    """
    from bookshelf.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
