"""
Composition Root

Builds the one-per-process instances of the admission and monitoring
components and wires them together. The application factory stores the result
on ``app.state.components``; request handlers reach it through
``dependencies.get_components`` and the lifespan starts/stops its periodic
cleanup task. There are no module-level singletons.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from sre_monitor.core.config.constants import Stage
from sre_monitor.core.config.settings import Settings
from sre_monitor.core.logging.logger import get_logger
from sre_monitor.core.resilience.admission import AdmissionController
from sre_monitor.core.resilience.circuit_breaker import CircuitBreaker
from sre_monitor.core.resilience.rate_limiter import RateLimiter
from sre_monitor.core.tasks import PeriodicTask
from sre_monitor.infrastructure.monitoring.health_checker import HealthChecker
from sre_monitor.infrastructure.monitoring.metrics_collector import MetricsCollector
from sre_monitor.infrastructure.monitoring.probes import (
    CircuitBreakerProbe,
    EventLoopProbe,
    MemoryProbe,
)

logger = get_logger(__name__)


@dataclass
class ServiceComponents:
    settings: Settings
    rate_limiter: RateLimiter
    circuit_breaker: CircuitBreaker
    admission: AdmissionController
    metrics: MetricsCollector
    health_checker: HealthChecker
    cleanup_task: PeriodicTask

    async def start(self) -> None:
        self.cleanup_task.start()

    async def stop(self) -> None:
        await self.cleanup_task.stop()


def build_components(
    settings: Settings,
    clock: Callable[[], float] = time.monotonic,
) -> ServiceComponents:
    """
    Construct and wire every component from settings.

    Args:
        settings: Application settings
        clock: Monotonic clock in seconds shared by the limiter, breaker and collector
    """
    rate_limit = settings.rate_limit
    rate_limiter = RateLimiter(
        window_seconds=rate_limit.RATE_LIMIT_WINDOW_SECONDS,
        max_requests=rate_limit.RATE_LIMIT_MAX_REQUESTS,
        clock=clock,
    )
    circuit_breaker = CircuitBreaker(
        failure_threshold=settings.circuit_breaker.CB_FAILURE_THRESHOLD,
        recovery_timeout=settings.circuit_breaker.CB_RECOVERY_TIMEOUT,
        clock=clock,
    )
    metrics = MetricsCollector(
        duration_capacity=settings.metrics.METRICS_DURATION_CAPACITY,
        max_endpoints=settings.metrics.METRICS_MAX_ENDPOINTS,
        clock=clock,
    )

    health_checker = HealthChecker(probe_timeout=settings.health.HEALTH_CHECK_TIMEOUT)
    health_checker.register_check(
        "memory", MemoryProbe(settings.health.HEALTH_CHECK_DEGRADED_THRESHOLD)
    )
    health_checker.register_check("event_loop", EventLoopProbe(metrics))
    health_checker.register_check("circuit_breaker", CircuitBreakerProbe(circuit_breaker))

    cleanup_task = PeriodicTask(
        "rate_limiter_cleanup",
        rate_limiter.cleanup,
        interval=rate_limit.RATE_LIMIT_CLEANUP_INTERVAL,
    )

    logger.info("Service components ready", checks=health_checker.check_names,
                stage=Stage.INITIALIZATION)

    return ServiceComponents(
        settings=settings,
        rate_limiter=rate_limiter,
        circuit_breaker=circuit_breaker,
        admission=AdmissionController(rate_limiter, circuit_breaker),
        metrics=metrics,
        health_checker=health_checker,
        cleanup_task=cleanup_task,
    )
