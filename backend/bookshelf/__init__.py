"""
Bookshelf Backend: Application Package
=======================================

What: A small REST API for a catalog of books (list, fetch, create, update, delete).
Who:  Imported by uvicorn (``bookshelf.main:app``), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (validation, books)     │  ← JSON Schema checks, one query per op
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy table + Pydantic envelopes
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
