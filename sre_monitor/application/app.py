#!/usr/bin/env python3
"""
FastAPI Application Entry Point

This is the main entry point for the SRE monitor service.
It configures the FastAPI application, middleware, and routes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sre_monitor.application.api.middleware import setup_middleware
from sre_monitor.application.api.routes import diagnostics_router, health_router, metrics_router
from sre_monitor.application.container import ServiceComponents, build_components
from sre_monitor.core.config.constants import Stage
from sre_monitor.core.config.settings import Settings, get_settings
from sre_monitor.core.logging.logger import get_logger, setup_logging

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).
    """
    components: ServiceComponents = app.state.components
    settings = components.settings

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting SRE monitor",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
        stage=Stage.INITIALIZATION,
    )

    await components.start()
    logger.info("Application startup complete", stage=Stage.INITIALIZATION)

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await components.stop()
        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    settings: Settings | None = None,
    components: ServiceComponents | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to build from; defaults to the process-wide settings
        components: Prebuilt components (tests pass ones driven by a fake clock)

    Returns:
        FastAPI: Configured application instance
    """
    if components is None:
        components = build_components(settings or get_settings())
    settings = components.settings

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Rate limiting, circuit breaking, metrics and health checks for an HTTP service",
        lifespan=lifespan,
    )
    app.state.components = components

    # No handler for SREMonitorError: handler exceptions must reach the
    # admission middleware, which records them as circuit breaker failures.
    setup_middleware(app, settings)

    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(diagnostics_router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "health": "/health",
            "metrics": "/metrics",
        }

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 404:
            return await http_exception_handler(request, exc)
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    return app


app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "sre_monitor.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.is_development,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
