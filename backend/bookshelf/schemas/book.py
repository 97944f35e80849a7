"""
Bookshelf Backend: Pydantic Response Schemas
=============================================

What:  Pydantic models describing what the API returns.
Why:   Response serialization and OpenAPI documentation.

Request bodies are deliberately NOT modelled here: write paths receive the
raw JSON object so the JSON Schema validator can report every missing or
mistyped property in declared order (see services/validation_service.py).
"""

from typing import List, Union

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BookOut(BaseModel):
    """Full representation of a stored book."""

    isbn: str = Field(description="Client-supplied primary key")
    amazon_url: str
    author: str
    language: str
    pages: int
    publisher: str
    title: str
    year: int

    model_config = {"from_attributes": True}


class BookResponse(BaseModel):
    """Returned by GET/PUT /books/{isbn} and POST /books."""

    book: BookOut


class BookListResponse(BaseModel):
    """Returned by GET /books, in the store's natural row order."""

    books: List[BookOut]


class MessageResponse(BaseModel):
    """Returned by DELETE /books/{isbn}."""

    message: str = Field(examples=["Book deleted"])


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    message: Union[str, List[str]]
    status: int


class ErrorResponse(BaseModel):
    """
    Error envelope shared by every failing endpoint.

    ``message`` is repeated at the top level for existing clients that read
    it from there.

    Example:
        {
            "error": {"message": "There is no book with an isbn '0", "status": 404},
            "message": "There is no book with an isbn '0"
        }
    """

    error: ErrorDetail
    message: Union[str, List[str]]


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
