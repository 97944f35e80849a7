"""
Bookshelf Backend: Book SQLAlchemy Model
=========================================

What:  ORM model for the `books` table.
Who:   Used by BookService to build statements and by Alembic for schema management.

Table Design:
    - isbn: Client-supplied natural key (TEXT primary key, never generated)
    - Every other column is NOT NULL; a book is only stored complete
    - No timestamps or soft-delete flag: rows are replaced in place by PUT
      and removed outright by DELETE
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base

# Declared field order. Validation messages and serialized books follow it.
BOOK_FIELDS = (
    "isbn",
    "amazon_url",
    "author",
    "language",
    "pages",
    "publisher",
    "title",
    "year",
)

# isbn is the key; updates never write it
BOOK_UPDATE_FIELDS = BOOK_FIELDS[1:]


class Book(Base):
    """A single catalog entry, keyed by isbn."""

    __tablename__ = "books"

    isbn: Mapped[str] = mapped_column(Text, primary_key=True)
    amazon_url: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(Text, nullable=False)
    pages: Mapped[int] = mapped_column(Integer, nullable=False)
    publisher: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Book(isbn='{self.isbn}', title='{self.title}')>"
