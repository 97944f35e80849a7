"""
Bookshelf Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios the API maps to HTTP.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) catch these and return the
       JSON error envelope with the matching status code.

Exception Hierarchy:
    BookshelfError (base)      → 500 Internal Server Error
    ├── ValidationError        → 400 Bad Request (message is a list of violations)
    ├── NotFoundError          → 404 Not Found
    └── DatabaseError          → 500 Internal Server Error (details logged only)
"""

from typing import Any, Dict, List, Optional, Union


class BookshelfError(Exception):
    """
    Base exception for all Bookshelf application errors.

    Attributes:
        message:  Client-facing description (a string, or a list of strings
                  for validation failures)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: Union[str, List[str]] = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BookshelfError):
    """
    Raised when a write-path request body fails JSON Schema validation.

    The message is the ordered list of violation strings, one per failing
    property, e.g. ``['instance requires property "isbn"', ...]``.
    """

    status_code = 400

    def __init__(
        self,
        messages: List[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=list(messages), context=context)
        self.messages = self.message


class NotFoundError(BookshelfError):
    """
    Raised when an isbn-keyed lookup, update or delete matches no row.

    The message keeps the historical form without a closing quote; existing
    clients compare it byte for byte.
    """

    status_code = 404

    def __init__(
        self,
        isbn: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["isbn"] = isbn
        super().__init__(message=f"There is no book with an isbn '{isbn}", context=ctx)
        self.isbn = isbn


class DatabaseError(BookshelfError):
    """
    Raised when a store operation fails unexpectedly.

    Covers constraint violations (e.g. a duplicate isbn on create) and
    connection failures. The message returned to the client is always
    generic; the original error is kept in ``context`` for the server log.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
