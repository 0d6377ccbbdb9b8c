"""
FastAPI Dependencies

Route handlers never import component singletons; they receive the
``ServiceComponents`` built by the application factory through FastAPI's
dependency injection. Tests build their own components (with a fake clock)
and hand them to ``create_app``.

Example:
    @router.get("/health")
    async def health(components: ComponentsDep):
        return await components.health_checker.run_checks()
"""

from typing import Annotated

from fastapi import Depends, Request

from sre_monitor.application.container import ServiceComponents
from sre_monitor.core.config.settings import Settings


def get_components(request: Request) -> ServiceComponents:
    """Components stored on ``app.state`` by ``create_app``."""
    return request.app.state.components


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with (not the process-wide singleton)."""
    return request.app.state.components.settings


def get_request_id(request: Request) -> str | None:
    """Request id assigned by RequestContextMiddleware."""
    return getattr(request.state, "request_id", None)


ComponentsDep = Annotated[ServiceComponents, Depends(get_components)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
RequestIdDep = Annotated[str | None, Depends(get_request_id)]
