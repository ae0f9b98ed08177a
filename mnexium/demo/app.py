"""FastAPI application factory for the demo chat server.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from mnexium.demo.dependencies import get_settings, reset_dependencies
from mnexium.demo.exceptions import DemoError, PageNotFoundError
from mnexium.demo.routes import register_routes
from mnexium.observability.logging import get_logger, setup_logging
from mnexium.observability.middleware import LoggingContextMiddleware
from mnexium.observability.tracing import setup_tracing

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await reset_dependencies()
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a fully configured FastAPI app with:
    - structlog logging configured from settings
    - CORS middleware
    - Logging context middleware
    - Global exception handlers
    - Optional OpenTelemetry instrumentation
    - All demo routes registered

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    setup_logging(
        level=settings.log_level,
        format=settings.observability.logging.format,
        redact_pii=settings.observability.logging.redact_pii,
    )

    app = FastAPI(
        title="Mnexium Demo Chat",
        description="Local chat UI backed by the Mnexium memory API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.demo.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Add logging context middleware
    app.add_middleware(LoggingContextMiddleware)

    # Register exception handlers
    _register_exception_handlers(app)

    # Register routes
    register_routes(app, settings)

    # Add OpenTelemetry instrumentation
    tracing = settings.observability.tracing
    if tracing.enabled:
        setup_tracing(
            service_name=tracing.service_name,
            otlp_endpoint=tracing.otlp_endpoint,
            console_export=tracing.console_export,
        )
        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info(
        "app_created",
        debug=settings.debug,
        base_url=settings.api.base_url,
        model=settings.demo.model,
    )

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(PageNotFoundError)
    async def page_not_found_handler(request: Request, exc: PageNotFoundError) -> Response:
        """Unknown pages answer in plain text, like a static file server."""
        logger.debug("page_not_found", path=request.url.path)
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(DemoError)
    async def demo_error_handler(request: Request, exc: DemoError) -> JSONResponse:
        """Handle DemoError and its subclasses."""
        logger.warning(
            "demo_error",
            message=exc.message,
            path=request.url.path,
        )
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
        )

        messages = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
            messages.append(f"{field}: {error['msg']}" if field else error["msg"])

        return JSONResponse({"error": "; ".join(messages)}, status_code=400)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse({"error": str(exc) or "Internal error"}, status_code=500)
