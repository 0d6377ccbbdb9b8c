#!/usr/bin/env python3
"""
Health Checker Module

This module aggregates a registry of independent health probes into a single
service status:
- Memory pressure
- Event loop lag
- Circuit breaker state

Aggregation rule:
- healthy:   every probe reports healthy (or no probe is registered)
- unhealthy: at least one probe reports unhealthy, fails or times out
- degraded:  otherwise

Each call recomputes from scratch; nothing is cached between calls.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
from datetime import datetime, timezone
from typing import Any

from sre_monitor.core.config.constants import HealthStatus, Stage
from sre_monitor.core.exceptions import ConfigurationError, ProbeFailureError
from sre_monitor.core.logging.logger import get_logger
from sre_monitor.infrastructure.monitoring.probes import HealthProbe

logger = get_logger(__name__)

_VALID_STATUSES = {status.value for status in HealthStatus}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class HealthChecker:
    """
    Health checker over a registry of probes.

    STAGE-H: Health check orchestration

    Usage:
        checker = HealthChecker(probe_timeout=2.0)
        checker.register_check("memory", MemoryProbe())

        report = await checker.run_checks()
        # {"status": "healthy", "checks": {"memory": {...}}, "timestamp": "..."}
    """

    def __init__(self, probe_timeout: float = 2.0):
        if probe_timeout <= 0:
            raise ConfigurationError(
                "Probe timeout must be positive", details={"probe_timeout": probe_timeout}
            )
        self.probe_timeout = probe_timeout
        self._checks: dict[str, HealthProbe] = {}

    @property
    def check_names(self) -> list[str]:
        return list(self._checks)

    def register_check(self, name: str, probe: HealthProbe) -> None:
        """
        Register a probe under ``name``. Intended for startup only.

        Raises:
            ConfigurationError: A probe is already registered under ``name``
        """
        if name in self._checks:
            raise ConfigurationError(
                f"Health check '{name}' is already registered", details={"check": name}
            )
        self._checks[name] = probe
        logger.info("Health check registered", check=name, stage=Stage.HEALTH)

    async def _run_probe(self, name: str, probe: HealthProbe) -> dict[str, Any]:
        """Run one probe; any failure becomes an unhealthy result for that probe only."""
        try:
            result = await asyncio.wait_for(probe.check(), timeout=self.probe_timeout)
        except asyncio.TimeoutError as e:
            error = ProbeFailureError.from_exception(
                e, message=f"Health check timed out after {self.probe_timeout}s", check=name
            )
            logger.warning("Health check timed out", check=name, stage=Stage.HEALTH)
            return {"status": HealthStatus.UNHEALTHY.value, "error": error.message}
        except Exception as e:
            error = ProbeFailureError.from_exception(e, check=name)
            logger.warning(
                "Health check failed",
                check=name,
                error=error.message,
                error_type=error.details["original_error"],
                stage=Stage.HEALTH,
            )
            return {"status": HealthStatus.UNHEALTHY.value, "error": error.message}

        if not isinstance(result, dict) or result.get("status") not in _VALID_STATUSES:
            logger.warning("Health check returned an invalid result", check=name,
                           stage=Stage.HEALTH)
            return {
                "status": HealthStatus.UNHEALTHY.value,
                "error": f"Invalid health check result: {result!r}",
            }
        return result

    @staticmethod
    def aggregate(statuses: list[str]) -> HealthStatus:
        if any(status == HealthStatus.UNHEALTHY.value for status in statuses):
            return HealthStatus.UNHEALTHY
        if all(status == HealthStatus.HEALTHY.value for status in statuses):
            return HealthStatus.HEALTHY
        return HealthStatus.DEGRADED

    async def run_checks(self) -> dict[str, Any]:
        """
        Run every registered probe concurrently and aggregate.

        STAGE-H.1: Aggregated health status

        Returns:
            Dict with status, per-check results and timestamp
        """
        names = list(self._checks)
        results = await asyncio.gather(
            *(self._run_probe(name, self._checks[name]) for name in names)
        )
        checks = dict(zip(names, results))
        status = self.aggregate([result["status"] for result in results])

        if status != HealthStatus.HEALTHY:
            logger.info(
                "Health check not healthy",
                status=status.value,
                failing=[n for n, r in checks.items() if r["status"] != HealthStatus.HEALTHY.value],
                stage=Stage.HEALTH,
            )

        return {
            "status": status.value,
            "checks": checks,
            "timestamp": utc_timestamp(),
        }

    async def readiness_check(self) -> dict[str, Any]:
        """
        Readiness probe.

        Only an unhealthy aggregate makes the service not ready; degraded
        instances keep receiving traffic.
        """
        report = await self.run_checks()
        ready = report["status"] != HealthStatus.UNHEALTHY.value
        return {
            "status": "ready" if ready else "not ready",
            "health": report["status"],
            "timestamp": report["timestamp"],
        }

    async def liveness_check(self) -> dict[str, Any]:
        """Liveness probe: the process answers, nothing else is checked."""
        return {
            "status": "alive",
            "timestamp": utc_timestamp(),
        }
