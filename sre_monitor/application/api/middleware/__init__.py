"""
Middleware Package

Request flow:  Client -> RequestContext -> Admission -> Handler
Response flow: Handler -> Admission -> RequestContext -> Client

``setup_middleware`` registers both in that order. Starlette runs the most
recently added middleware first, so the request context is added last.
"""

from fastapi import FastAPI

from sre_monitor.core.config.settings import Settings
from sre_monitor.core.logging.logger import get_logger

from .admission import AdmissionMiddleware, client_identifier
from .request_context import RequestContextMiddleware

logger = get_logger(__name__)


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register the request pipeline middleware in the correct order."""
    app.add_middleware(AdmissionMiddleware, include_error_details=settings.is_development)
    app.add_middleware(RequestContextMiddleware, app_version=settings.app.APP_VERSION)
    logger.info("Middleware registered", environment=settings.app.ENVIRONMENT)


__all__ = [
    "AdmissionMiddleware",
    "RequestContextMiddleware",
    "client_identifier",
    "setup_middleware",
]
