"""
Bookshelf Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       the module-level `app` is what uvicorn serves (bookshelf.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request context → CORS                │
    │                                                     │
    │  Routes:      /books (CRUD)      GET /health        │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ NotFound→404 │ DB/other→500  │
    └─────────────────────────────────────────────────────┘

Error envelope (every non-2xx response):
    {"error": {"message": <str | list[str]>, "status": <int>}, "message": <same>}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.database import dispose_engine
from bookshelf.exceptions import (
    BookshelfError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from bookshelf.middleware.context import RequestContextMiddleware, request_id_var
from bookshelf.routes import books, health

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo is controlled by LOG_LEVEL=DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Bookshelf Backend %s starting up...", __version__)
    logger.info("Listening on http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Bookshelf Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status: int,
    message: Union[str, List[str]],
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the error envelope; the message is repeated at the top level."""
    return JSONResponse(
        status_code=status,
        headers=headers,
        content={
            "error": {"message": message, "status": status},
            "message": message,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the shared error envelope.

    Handler hierarchy:
        ValidationError            → 400
        RequestValidationError     → 400 (malformed JSON body)
        NotFoundError              → 404
        StarletteHTTPException     → its own status (unknown route 404, bad method 405)
        DatabaseError              → 500 (generic message, details logged)
        BookshelfError (base)      → 500
        Exception (fallback)       → 500

    Stack traces and SQL never reach the client.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.messages)
        return error_response(exc.status_code, exc.messages)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        messages = [str(err.get("msg", "Invalid request")) for err in exc.errors()]
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), messages)
        return error_response(400, messages)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        headers = getattr(exc, "headers", None)
        return error_response(exc.status_code, str(exc.detail), headers=headers)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(exc.status_code, GENERIC_ERROR_MESSAGE)

    @app.exception_handler(BookshelfError)
    async def handle_bookshelf_error(request: Request, exc: BookshelfError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(exc.status_code, GENERIC_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(500, GENERIC_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Bookshelf API",
        description="REST API for a catalog of books keyed by isbn.",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition: request context runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(books.router)
    app.include_router(health.router)

    return app


app = create_app()
