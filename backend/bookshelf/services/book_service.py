"""
Bookshelf Backend: Book Service (Entity Operations)
====================================================

What:  find_all, find_one, create, update and remove for the `books` table.
Why:   Keeps SQL and the "no row" → NotFoundError mapping out of the router.
How:   Each method builds exactly one statement and hands it to the
       database executor. Nothing is wrapped in an explicit transaction
       beyond the per-request session.

Error Handling Strategy:
    - Zero rows on a keyed operation → NotFoundError (404)
    - Any SQLAlchemy failure (duplicate isbn, lost connection) → DatabaseError (500)
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy import Executable, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf import database
from bookshelf.exceptions import DatabaseError, NotFoundError
from bookshelf.models.book import BOOK_FIELDS, BOOK_UPDATE_FIELDS, Book

logger = logging.getLogger(__name__)

books_table = Book.__table__


class BookService:
    """
    Stateless entity operations; the session is passed in on every call.

    Rows come back as plain dicts keyed by column name.
    """

    async def _run(
        self, db: AsyncSession, statement: Executable, operation: str
    ) -> List[Dict[str, Any]]:
        try:
            return await database.execute(db, statement)
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", operation, str(e))
            raise DatabaseError(
                context={"operation": operation, "original_error": type(e).__name__},
            ) from e

    async def find_all(self, db: AsyncSession) -> List[Dict[str, Any]]:
        """All books, in whatever order the store returns them (no ORDER BY)."""
        return await self._run(db, select(books_table), "find_all")

    async def find_one(self, db: AsyncSession, isbn: str) -> Dict[str, Any]:
        """
        Fetch one book by its isbn.

        Raises:
            NotFoundError: no row has this isbn
        """
        rows = await self._run(
            db, select(books_table).where(books_table.c.isbn == isbn), "find_one"
        )
        if not rows:
            logger.warning("Lookup missed: isbn=%s", isbn)
            raise NotFoundError(isbn)
        return rows[0]

    async def create(self, db: AsyncSession, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Insert a validated book and return the stored row.

        Only the eight known columns are written; extra keys are ignored.
        A duplicate isbn surfaces as DatabaseError.
        """
        values = {name: data[name] for name in BOOK_FIELDS}
        rows = await self._run(
            db,
            insert(books_table).values(**values).returning(*books_table.c),
            "create",
        )
        logger.info("Book created: isbn=%s", rows[0]["isbn"])
        return rows[0]

    async def update(
        self, db: AsyncSession, isbn: str, data: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Replace every non-key column of the book with this isbn.

        The isbn itself is never written, even when ``data`` carries one.

        Raises:
            NotFoundError: no row has this isbn
        """
        values = {name: data[name] for name in BOOK_UPDATE_FIELDS}
        rows = await self._run(
            db,
            update(books_table)
            .where(books_table.c.isbn == isbn)
            .values(**values)
            .returning(*books_table.c),
            "update",
        )
        if not rows:
            logger.warning("Update missed: isbn=%s", isbn)
            raise NotFoundError(isbn)
        logger.info("Book updated: isbn=%s", isbn)
        return rows[0]

    async def remove(self, db: AsyncSession, isbn: str) -> None:
        """
        Delete the book with this isbn.

        Raises:
            NotFoundError: no row has this isbn
        """
        rows = await self._run(
            db,
            delete(books_table)
            .where(books_table.c.isbn == isbn)
            .returning(books_table.c.isbn),
            "remove",
        )
        if not rows:
            logger.warning("Delete missed: isbn=%s", isbn)
            raise NotFoundError(isbn)
        logger.info("Book deleted: isbn=%s", isbn)


book_service = BookService()
