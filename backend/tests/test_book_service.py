"""
Bookshelf Backend: Book Service Unit Tests
===========================================

What:  BookService against a mock session (no real database).
What we test:
    ✅ Rows are returned as dicts
    ✅ Zero rows on a keyed operation → NotFoundError with the fixed message
    ✅ Update never writes isbn; extra keys are not written
    ✅ SQLAlchemy failures are wrapped in DatabaseError
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from bookshelf.exceptions import DatabaseError, NotFoundError
from bookshelf.services.book_service import BookService


def _rows(session, rows):
    """Make session.execute return a result carrying ``rows``."""
    result = MagicMock()
    result.returns_rows = True
    result.mappings.return_value.all.return_value = rows
    session.execute = AsyncMock(return_value=result)


def _compiled_params(session):
    statement = session.execute.await_args.args[0]
    return statement.compile().params


class TestFindAll:

    def setup_method(self):
        self.service = BookService()

    @pytest.mark.asyncio
    async def test_returns_every_row(self, mock_db_session, seeded_row, new_book):
        _rows(mock_db_session, [seeded_row, new_book])

        books = await self.service.find_all(mock_db_session)

        assert [book["isbn"] for book in books] == ["0691161518", "0691161519"]
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_table(self, mock_db_session):
        _rows(mock_db_session, [])
        assert await self.service.find_all(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_store_error_is_wrapped(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.find_all(mock_db_session)

        assert exc_info.value.context["operation"] == "find_all"


class TestFindOne:

    def setup_method(self):
        self.service = BookService()

    @pytest.mark.asyncio
    async def test_found(self, mock_db_session, seeded_row):
        _rows(mock_db_session, [seeded_row])

        book = await self.service.find_one(mock_db_session, "0691161518")

        assert book == seeded_row

    @pytest.mark.asyncio
    async def test_not_found_message(self, mock_db_session):
        _rows(mock_db_session, [])

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.find_one(mock_db_session, "0")

        assert exc_info.value.message == "There is no book with an isbn '0"
        assert exc_info.value.status_code == 404


class TestCreate:

    def setup_method(self):
        self.service = BookService()

    @pytest.mark.asyncio
    async def test_returns_created_row(self, mock_db_session, new_book):
        _rows(mock_db_session, [dict(new_book)])

        book = await self.service.create(mock_db_session, new_book)

        assert book["isbn"] == new_book["isbn"]

    @pytest.mark.asyncio
    async def test_extra_keys_are_not_written(self, mock_db_session, new_book):
        _rows(mock_db_session, [dict(new_book)])

        await self.service.create(mock_db_session, {**new_book, "edition": "2nd"})

        params = _compiled_params(mock_db_session)
        assert "edition" not in params
        assert params["isbn"] == new_book["isbn"]

    @pytest.mark.asyncio
    async def test_duplicate_isbn_becomes_database_error(self, mock_db_session, new_book):
        mock_db_session.execute = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create(mock_db_session, new_book)

        assert exc_info.value.context["original_error"] == "IntegrityError"


class TestUpdate:

    def setup_method(self):
        self.service = BookService()

    @pytest.mark.asyncio
    async def test_returns_updated_row(self, mock_db_session, new_book):
        updated = {**new_book, "isbn": "0691161518"}
        _rows(mock_db_session, [updated])

        book = await self.service.update(mock_db_session, "0691161518", new_book)

        assert book["isbn"] == "0691161518"
        assert book["title"] == new_book["title"]

    @pytest.mark.asyncio
    async def test_isbn_is_never_written(self, mock_db_session, new_book):
        _rows(mock_db_session, [{**new_book, "isbn": "0691161518"}])

        await self.service.update(mock_db_session, "0691161518", new_book)

        params = _compiled_params(mock_db_session)
        assert "isbn" not in params
        assert params["title"] == new_book["title"]

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db_session, new_book):
        _rows(mock_db_session, [])

        with pytest.raises(NotFoundError, match="There is no book with an isbn '0$"):
            await self.service.update(mock_db_session, "0", new_book)


class TestRemove:

    def setup_method(self):
        self.service = BookService()

    @pytest.mark.asyncio
    async def test_deletes(self, mock_db_session):
        _rows(mock_db_session, [{"isbn": "0691161518"}])

        assert await self.service.remove(mock_db_session, "0691161518") is None
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db_session):
        _rows(mock_db_session, [])

        with pytest.raises(NotFoundError):
            await self.service.remove(mock_db_session, "0")
