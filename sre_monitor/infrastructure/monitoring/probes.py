"""
Health Probes

Each probe answers one question about the running process and reports
``{"status": <healthy|degraded|unhealthy>, ...details}``. Probes only read
snapshots of the components they watch; they never mutate them.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import psutil

from sre_monitor.core.config.constants import (
    EVENT_LOOP_LAG_DEGRADED_MS,
    EVENT_LOOP_LAG_HEALTHY_MS,
    CircuitState,
    HealthStatus,
)
from sre_monitor.core.resilience.circuit_breaker import CircuitBreaker
from sre_monitor.infrastructure.monitoring.metrics_collector import MetricsCollector


class HealthProbe(ABC):
    """A single health check."""

    @abstractmethod
    async def check(self) -> dict[str, Any]:
        """Return ``{"status": HealthStatus value, ...details}``."""


class MemoryProbe(HealthProbe):
    """
    Memory pressure of this process.

    The ratio is the process RSS against the cgroup memory limit when one is
    set (cgroup v2 `memory.max`, then v1 `memory.limit_in_bytes`), falling
    back to the host total. Degraded once the ratio reaches the threshold;
    never unhealthy.
    """

    CGROUP_LIMIT_FILES = ("memory.max", "memory/memory.limit_in_bytes")

    def __init__(
        self,
        degraded_threshold: float = 0.8,
        cgroup_root: Path = Path("/sys/fs/cgroup"),
    ):
        self.degraded_threshold = degraded_threshold
        self.cgroup_root = cgroup_root
        self._process = psutil.Process()

    def _cgroup_limit(self, host_total: int) -> int | None:
        for name in self.CGROUP_LIMIT_FILES:
            try:
                raw = (self.cgroup_root / name).read_text().strip()
            except OSError:
                continue
            if not raw.isdigit():
                # "max" means unlimited
                return None
            limit = int(raw)
            # v1 reports "unlimited" as a page-rounded huge number
            return limit if 0 < limit < host_total else None
        return None

    async def check(self) -> dict[str, Any]:
        rss = self._process.memory_info().rss
        host_total = psutil.virtual_memory().total
        limit = self._cgroup_limit(host_total)
        total = limit if limit is not None else host_total

        ratio = rss / total if total else 0.0
        status = HealthStatus.HEALTHY if ratio < self.degraded_threshold else HealthStatus.DEGRADED
        return {
            "status": status.value,
            "used_bytes": rss,
            "total_bytes": total,
            "limit_source": "cgroup" if limit is not None else "host",
            "percent_used": f"{ratio * 100:.2f}%",
        }


class EventLoopProbe(HealthProbe):
    """Event loop lag as measured by the metrics collector."""

    def __init__(self, metrics: MetricsCollector):
        self._metrics = metrics

    async def check(self) -> dict[str, Any]:
        lag = self._metrics.get_event_loop_lag()
        if lag < EVENT_LOOP_LAG_HEALTHY_MS:
            status = HealthStatus.HEALTHY
        elif lag < EVENT_LOOP_LAG_DEGRADED_MS:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY
        return {"status": status.value, "lag_ms": round(lag, 3)}


class CircuitBreakerProbe(HealthProbe):
    """Healthy only while the circuit is closed."""

    def __init__(self, breaker: CircuitBreaker):
        self._breaker = breaker

    async def check(self) -> dict[str, Any]:
        state = self._breaker.get_state()
        healthy = state["state"] == CircuitState.CLOSED.value
        return {
            "status": (HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED).value,
            **state,
        }
