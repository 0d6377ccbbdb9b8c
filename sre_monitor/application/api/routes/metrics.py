"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response

from sre_monitor.application.api.dependencies import ComponentsDep

router = APIRouter(tags=["Monitoring"])


@router.get("/metrics")
async def prometheus_metrics(components: ComponentsDep) -> Response:
    """
    Text exposition of the request metrics.

    Declared ``async`` so the scrape runs on the event loop, where the
    collector can schedule its event loop lag measurement.
    """
    metrics = components.metrics
    return Response(content=metrics.render_metrics(), media_type=metrics.get_content_type())
