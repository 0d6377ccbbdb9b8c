"""
Monitoring Module

- **metrics_collector.py**: request outcome recording and Prometheus exposition
- **probes.py**: HealthProbe interface with memory, event loop and circuit breaker probes
- **health_checker.py**: probe registry and status aggregation
"""

from sre_monitor.infrastructure.monitoring.health_checker import HealthChecker
from sre_monitor.infrastructure.monitoring.metrics_collector import MetricsCollector
from sre_monitor.infrastructure.monitoring.probes import (
    CircuitBreakerProbe,
    EventLoopProbe,
    HealthProbe,
    MemoryProbe,
)

__all__ = [
    "CircuitBreakerProbe",
    "EventLoopProbe",
    "HealthChecker",
    "HealthProbe",
    "MemoryProbe",
    "MetricsCollector",
]
