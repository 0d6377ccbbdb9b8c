"""
Resilience Module

In-process admission control for the HTTP service.

- **rate_limiter.py**: per-identifier sliding-window rate limiter
- **circuit_breaker.py**: process-wide CLOSED/OPEN/HALF_OPEN breaker
- **admission.py**: the combined admission check used per request
"""

from sre_monitor.core.resilience.admission import AdmissionController
from sre_monitor.core.resilience.circuit_breaker import CircuitBreaker
from sre_monitor.core.resilience.rate_limiter import RateLimiter

__all__ = [
    "AdmissionController",
    "CircuitBreaker",
    "RateLimiter",
]
