"""
Bookshelf Backend: Request Context Middleware
==============================================

What:  Tags each request with a correlation ID and writes one access log line
       once the response (or error envelope) is ready.
How:   The ID comes from the client's X-Request-ID header or a short UUID, is
       kept in a ContextVar for exception handlers, and is echoed back in the
       X-Request-ID response header.

Access log line:
    PUT /books/0691161518 404 3.2ms isbn=0691161518 [a1b2c3d4] from 127.0.0.1

    Level follows the status: 5xx ERROR, 4xx WARNING, otherwise INFO.
    Bodies are never logged. /health is neither logged nor timed.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

access_logger = logging.getLogger("bookshelf.access")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

UNLOGGED_PATHS = {"/health"}


def _status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _isbn(request: Request) -> Optional[str]:
    # The router fills path_params into the shared scope during call_next
    return request.scope.get("path_params", {}).get("isbn")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        if request.url.path in UNLOGGED_PATHS:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = rid

        status = response.status_code
        isbn = _isbn(request)
        client_ip = request.client.host if request.client else "unknown"
        access_logger.log(
            _status_level(status),
            "%s %s %d %.1fms isbn=%s [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            isbn or "-",
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": status,
                "isbn": isbn,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
