"""Demo route registration."""

from fastapi import FastAPI

from mnexium.config import Settings
from mnexium.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register all routes with the FastAPI application.

    The static catch-all is registered last so it never shadows an API route.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    from mnexium.demo.routes.chat import router as chat_router
    from mnexium.demo.routes.history import router as history_router
    from mnexium.demo.routes.memories import router as memories_router
    from mnexium.demo.routes.metrics import get_metrics
    from mnexium.demo.routes.pages import router as pages_router

    app.include_router(chat_router, tags=["Chat"])
    app.include_router(history_router, tags=["History"])
    app.include_router(memories_router, tags=["Memories"])

    if settings.observability.metrics.enabled:
        app.add_api_route(
            settings.observability.metrics.path,
            get_metrics,
            methods=["GET"],
            tags=["Metrics"],
        )

    app.include_router(pages_router, tags=["Pages"])

    logger.info(
        "routes_registered",
        metrics=settings.observability.metrics.enabled,
    )
