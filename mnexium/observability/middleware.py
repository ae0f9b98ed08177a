"""Logging context middleware for the demo server.

Binds request_id, trace_id, subject_id and chat_id to structlog contextvars
for the duration of each request.
"""

import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

from mnexium.observability.logging import get_logger
from mnexium.observability.tracing import get_current_trace_id

logger = get_logger(__name__)


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware that binds request context to structlog contextvars.

    subject_id and chat_id come from the query string, which is where the
    demo's pass-through routes carry them. The generated request id is
    echoed back in the X-Request-ID response header.
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request and bind logging context."""
        clear_contextvars()

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        bind_contextvars(
            request_id=request_id,
            trace_id=get_current_trace_id(),
            subject_id=request.query_params.get("subject_id"),
            chat_id=request.query_params.get("chat_id"),
        )

        logger.debug(
            "request_started",
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)  # type: ignore[misc]

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )

        response.headers["X-Request-ID"] = request_id
        return response  # type: ignore[no-any-return]
