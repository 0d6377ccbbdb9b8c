"""
Diagnostic Routes

- ``/info``: runtime and host facts (psutil)
- ``/debug``: raw internal state; development only
- ``/error``: raises on purpose so the circuit breaker can be exercised
"""

import os
import platform
import socket
import sys

import psutil
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from sre_monitor.application.api.dependencies import ComponentsDep, RequestIdDep
from sre_monitor.core.config.constants import Stage
from sre_monitor.core.exceptions import HandlerFailureError
from sre_monitor.core.logging.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Diagnostics"])


@router.get("/info")
async def service_info(components: ComponentsDep, request_id: RequestIdDep):
    settings = components.settings
    memory = psutil.virtual_memory()
    return {
        "app": settings.app.APP_NAME,
        "version": settings.app.APP_VERSION,
        "environment": settings.app.ENVIRONMENT,
        "hostname": socket.gethostname(),
        "platform": sys.platform,
        "arch": platform.machine(),
        "python_version": platform.python_version(),
        "uptime": components.metrics.uptime_seconds(),
        "memory": components.metrics.process_stats(),
        "cpus": os.cpu_count(),
        "load_avg": list(psutil.getloadavg()),
        "total_memory": memory.total,
        "free_memory": memory.available,
        "request_id": request_id,
    }


@router.get("/debug")
async def debug_state(components: ComponentsDep, request_id: RequestIdDep):
    """
    Dump the live component state.

    Refused with 403 outside the development environment; the response
    includes every effective setting.
    """
    settings = components.settings
    if not settings.is_development:
        logger.warning("Debug endpoint refused", environment=settings.app.ENVIRONMENT,
                       stage=Stage.REQUEST_HANDLING)
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": "Debug endpoint disabled in production"},
        )

    return {
        "metrics": components.metrics.snapshot(),
        "circuit_breaker": components.circuit_breaker.get_state(),
        "rate_limiter": components.rate_limiter.get_stats(),
        "health_checks": components.health_checker.check_names,
        "config": settings.model_dump(),
        "request_id": request_id,
    }


@router.get("/error")
async def simulate_error(request_id: RequestIdDep):
    raise HandlerFailureError("Simulated error for testing", request_id=request_id)
