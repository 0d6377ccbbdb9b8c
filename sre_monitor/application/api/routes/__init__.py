from .diagnostics import router as diagnostics_router
from .health import router as health_router
from .metrics import router as metrics_router

__all__ = ["diagnostics_router", "health_router", "metrics_router"]
