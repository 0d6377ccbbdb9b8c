"""
Request Context Middleware

Outermost middleware. It assigns the request id before anything else runs so
that every log line of the request, admission refusals included, carries it:

- Echo the caller's ``X-Request-ID`` or generate one
- Bind it to the logging context and ``request.state``
- Log the request on the way in and its outcome on the way out
- Stamp ``X-Request-ID`` and ``X-App-Version`` on every response
"""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sre_monitor.core.config.constants import HEADER_APP_VERSION, HEADER_REQUEST_ID
from sre_monitor.core.logging.logger import clear_request_id, get_logger, set_request_id

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id propagation and request/response logging."""

    def __init__(self, app, app_version: str):
        super().__init__(app)
        self.app_version = app_version

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(HEADER_REQUEST_ID) or uuid.uuid4().hex
        request.state.request_id = request_id
        set_request_id(request_id)

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        try:
            logger.info(
                f"Incoming request: {method} {path}",
                method=method,
                path=path,
                client_host=request.client.host if request.client else None,
            )

            response = await call_next(request)

            logger.info(
                f"Request completed: {method} {path}",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_seconds=round(time.perf_counter() - start_time, 4),
            )

            response.headers[HEADER_REQUEST_ID] = request_id
            response.headers[HEADER_APP_VERSION] = self.app_version
            return response
        finally:
            clear_request_id()
