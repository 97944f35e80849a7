"""
Bookshelf Backend: Books Route Handlers
========================================

What:  The five /books endpoints.
How:   Write paths validate the raw JSON body first and short-circuit with
       400 before the store is touched; everything else is delegated to
       BookService. NotFoundError and DatabaseError are rendered by the
       global exception handlers.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.database import get_db_session
from bookshelf.schemas.book import (
    BookListResponse,
    BookResponse,
    ErrorResponse,
    MessageResponse,
)
from bookshelf.services.book_service import book_service
from bookshelf.services.validation_service import book_validator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])


@router.get(
    "",
    response_model=BookListResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all books",
)
async def list_books(db: AsyncSession = Depends(get_db_session)) -> BookListResponse:
    books = await book_service.find_all(db)
    return BookListResponse(books=books)


@router.get(
    "/{isbn}",
    response_model=BookResponse,
    responses={404: {"description": "No book with this isbn", "model": ErrorResponse}},
    summary="Get a single book by isbn",
)
async def get_book(isbn: str, db: AsyncSession = Depends(get_db_session)) -> BookResponse:
    book = await book_service.find_one(db, isbn)
    return BookResponse(book=book)


@router.post(
    "",
    status_code=201,
    response_model=BookResponse,
    responses={
        400: {"description": "Body failed schema validation", "model": ErrorResponse},
        500: {"description": "Store error (e.g. duplicate isbn)", "model": ErrorResponse},
    },
    summary="Create a book",
)
async def create_book(
    payload: Any = Body(default=None, description="Book fields as a JSON object"),
    db: AsyncSession = Depends(get_db_session),
) -> BookResponse:
    """
    Create a book from a client-supplied body carrying all eight fields.

    The isbn is taken from the body, never generated.
    """
    data = {} if payload is None else payload
    book_validator.validate_create(data)
    book = await book_service.create(db, data)
    return BookResponse(book=book)


@router.put(
    "/{isbn}",
    response_model=BookResponse,
    responses={
        400: {"description": "Body failed schema validation", "model": ErrorResponse},
        404: {"description": "No book with this isbn", "model": ErrorResponse},
    },
    summary="Replace a book's fields",
)
async def update_book(
    isbn: str,
    payload: Any = Body(default=None, description="Book fields as a JSON object"),
    db: AsyncSession = Depends(get_db_session),
) -> BookResponse:
    """
    Replace every field except isbn.

    An isbn in the body is accepted but ignored; the path decides which
    book changes and the key itself never changes.
    """
    data = {} if payload is None else payload
    book_validator.validate_update(data)
    book = await book_service.update(db, isbn, data)
    return BookResponse(book=book)


@router.delete(
    "/{isbn}",
    response_model=MessageResponse,
    responses={404: {"description": "No book with this isbn", "model": ErrorResponse}},
    summary="Delete a book",
)
async def delete_book(isbn: str, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await book_service.remove(db, isbn)
    return MessageResponse(message="Book deleted")
