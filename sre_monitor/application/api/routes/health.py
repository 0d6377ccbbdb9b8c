"""
Health Check Routes

Three probes with different audiences:

- ``/health``: full aggregated report. 200 while healthy or degraded, 503 once
  any check is unhealthy, so load balancers can act on the status code alone.
- ``/ready``: readiness. Only an unhealthy aggregate takes the instance out of
  rotation.
- ``/live``: liveness. Runs no checks; answering at all proves the process is up.
"""

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

from sre_monitor.application.api.dependencies import ComponentsDep, RequestIdDep
from sre_monitor.core.config.constants import HealthStatus

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(components: ComponentsDep, response: Response):
    report = await components.health_checker.run_checks()
    if report["status"] == HealthStatus.UNHEALTHY.value:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report


@router.get("/ready")
async def readiness_probe(components: ComponentsDep, request_id: RequestIdDep):
    readiness = await components.health_checker.readiness_check()
    readiness["request_id"] = request_id
    if readiness["status"] != "ready":
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=readiness)
    return readiness


@router.get("/live")
async def liveness_probe(components: ComponentsDep, request_id: RequestIdDep):
    liveness = await components.health_checker.liveness_check()
    liveness["request_id"] = request_id
    return liveness
