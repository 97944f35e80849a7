"""
Bookshelf Backend: Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, FastAPI dependency and the
       statement executor used by the book service.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.

Connection Pooling:
    The pool is SQLAlchemy's; concurrent requests each check out their own
    connection. Row-level consistency for concurrent writers is left to the
    database: every book operation is a single statement.
"""

from typing import Any, AsyncGenerator, Dict, List

from sqlalchemy import Executable
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bookshelf.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.uses_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: attributes stay readable after the request commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Statement Executor ────────────────────────────────────────────────────
async def execute(session: AsyncSession, statement: Executable) -> List[Dict[str, Any]]:
    """
    Run one statement and return its rows as plain dicts.

    Passthrough only: no retries, no translation of errors. Statements
    without a result set (no RETURNING) yield an empty list.
    """
    result = await session.execute(statement)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


async def dispose_engine() -> None:
    """Closes all pooled connections; called during application shutdown."""
    await engine.dispose()
