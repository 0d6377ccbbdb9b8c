"""
Admission Middleware

Drives the per-request pipeline around every route:

    rate limit -> circuit breaker -> handler -> outcome recording

- A rate limit refusal returns 429, an open circuit returns 503; neither
  reaches the handler.
- A handler that raises is recorded as a circuit breaker failure and answered
  with a generic 500 (the exception text is only exposed in development).
- Every request, admitted or not, is recorded exactly once in the metrics
  collector with its final status code.
"""

import time
import traceback
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from sre_monitor.core.config.constants import (
    HEADER_RATE_LIMIT,
    HEADER_RATE_REMAINING,
    HEADER_RETRY_AFTER,
    Stage,
)
from sre_monitor.core.exceptions import AdmissionRejectedError, RateLimitExceededError
from sre_monitor.core.logging.logger import get_logger

logger = get_logger(__name__)


def client_identifier(request: Request) -> str:
    """Rate limiting key: the client address."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class AdmissionMiddleware(BaseHTTPMiddleware):
    """Admission control, failure absorption and outcome recording."""

    def __init__(self, app, include_error_details: bool = False):
        """
        Args:
            app: The ASGI application
            include_error_details: Expose exception text and traceback in 500
                responses (development only)
        """
        super().__init__(app)
        self.include_error_details = include_error_details

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        components = request.app.state.components
        request_id = getattr(request.state, "request_id", None)
        identifier = client_identifier(request)
        start = time.perf_counter()

        try:
            components.admission.admit(identifier, request_id=request_id)
        except AdmissionRejectedError as e:
            response = self._rejection_response(e, request_id)
        else:
            response, failed = await self._handle(request, call_next, components, request_id)
            if not failed:
                limiter = components.rate_limiter
                response.headers[HEADER_RATE_LIMIT] = str(limiter.max_requests)
                response.headers[HEADER_RATE_REMAINING] = str(limiter.remaining(identifier))

        duration_ms = (time.perf_counter() - start) * 1000
        components.metrics.record_request(duration_ms, response.status_code, request.url.path)
        return response

    async def _handle(
        self, request: Request, call_next: Callable, components, request_id: str | None
    ) -> tuple[Response, bool]:
        """Run the handler; returns the response and whether the handler failed."""
        try:
            response = await call_next(request)
        except Exception as e:
            components.admission.record_outcome(success=False)
            logger.error(
                "Request handler error",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
                stage=Stage.REQUEST_HANDLING,
            )
            return self._error_response(e, request_id), True

        components.admission.record_outcome(success=True)
        return response, False

    def _rejection_response(self, exc: AdmissionRejectedError, request_id: str | None) -> Response:
        if isinstance(exc, RateLimitExceededError):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": "Too Many Requests",
                    "message": exc.message,
                    "request_id": request_id,
                },
                headers={HEADER_RETRY_AFTER: str(exc.details.get("retry_after", 1))},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "Service Unavailable",
                "message": exc.message,
                "request_id": request_id,
            },
        )

    def _error_response(self, exc: Exception, request_id: str | None) -> Response:
        content = {
            "error": "Internal Server Error",
            "request_id": request_id,
            "message": str(exc) if self.include_error_details else "An error occurred",
        }
        if self.include_error_details:
            content["error_type"] = type(exc).__name__
            content["traceback"] = traceback.format_exc()
        return JSONResponse(status_code=500, content=content)
