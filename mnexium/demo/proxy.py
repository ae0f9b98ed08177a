"""Forwarding helpers shared by the pass-through routes.

The demo never hands the browser a structured error status. A service
error answered with 4xx passes its JSON body through with 200. A 5xx or
an unreachable service becomes a 500 that still carries the expected
list key. A body that is not JSON, or not the expected shape, becomes
the route's empty body with 200 where the route has one.
"""

from collections.abc import Awaitable
from typing import Any

from fastapi.responses import JSONResponse

from mnexium.client import (
    MnexiumAPIError,
    MnexiumClientError,
    MnexiumResponseError,
)
from mnexium.demo.exceptions import MissingParameterError
from mnexium.observability.logging import get_logger
from mnexium.observability.metrics import DEMO_FALLBACKS

logger = get_logger(__name__)


def require(name: str, value: str | None) -> str:
    """Return a non-blank query parameter or raise MissingParameterError."""
    if value is None or not value.strip():
        raise MissingParameterError(name)
    return value


async def forward(
    route: str,
    call: Awaitable[dict[str, Any]],
    *,
    empty: dict[str, Any] | None = None,
    list_key: str | None = None,
) -> JSONResponse:
    """Await an upstream call and shape the demo response.

    Args:
        route: Route name for logs and metrics
        call: Awaitable producing the JSON body to return
        empty: 200 body used when the upstream body is unusable;
            None turns that case into a 500
        list_key: Key set to [] in 500 bodies

    Returns:
        JSONResponse for the browser, always 200 or 500
    """
    try:
        body = await call
    except MnexiumResponseError as exc:
        logger.warning("upstream_body_unusable", route=route, body=str(exc.details)[:200])
        if empty is not None:
            DEMO_FALLBACKS.labels(route=route, reason="bad_body").inc()
            return JSONResponse(empty)
        return _failure(route, exc, list_key, reason="bad_body")
    except MnexiumAPIError as exc:
        logger.warning(
            "upstream_error",
            route=route,
            status_code=exc.status_code,
            error_code=exc.error_code,
        )
        if exc.status_code is not None and exc.status_code < 500:
            content = exc.details if isinstance(exc.details, dict) else {"error": exc.message}
            return JSONResponse(content)
        return _failure(route, exc, list_key, reason="upstream_error")
    except MnexiumClientError as exc:
        return _failure(route, exc, list_key, reason="unreachable")

    return JSONResponse(body)


def _failure(
    route: str,
    exc: MnexiumClientError,
    list_key: str | None,
    reason: str,
) -> JSONResponse:
    logger.error("upstream_failed", route=route, error=exc.message, reason=reason)
    DEMO_FALLBACKS.labels(route=route, reason=reason).inc()
    content: dict[str, Any] = {"error": exc.message}
    if list_key:
        content[list_key] = []
    return JSONResponse(content, status_code=500)
