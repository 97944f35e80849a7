"""
Alembic environment for the books table.

Online only: migrations run through an async engine built from
DATABASE_URL (bookshelf.config), never from alembic.ini.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import Connection, pool
from sqlalchemy.ext.asyncio import create_async_engine

from bookshelf.config import settings
from bookshelf.database import Base
from bookshelf.models.book import Book  # noqa: F401  registers `books` on Base.metadata

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=Base.metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations() -> None:
    # NullPool: one short-lived connection for the migration run
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(_migrate)
    await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("Offline (--sql) migrations are not supported; run against a database.")

asyncio.run(run_migrations())
