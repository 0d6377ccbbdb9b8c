"""
Admission Exceptions

Raised when the admission layer refuses a request. A rejection is not an
internal fault: the HTTP layer turns it into a 429 or 503 response and the
request is never retried internally.

Author: System Architect
Date: 2025-12-08
"""

from sre_monitor.core.exceptions.base import SREMonitorError


class AdmissionRejectedError(SREMonitorError):
    """Base exception for admission refusals."""

    status_code: int = 503


class RateLimitExceededError(AdmissionRejectedError):
    """
    Raised when an identifier exceeds its sliding-window quota.

    The response should include:
    - Retry-After: Seconds until the window admits a new request
    - X-RateLimit-Limit: Maximum requests allowed per window
    - X-RateLimit-Remaining: Requests remaining (always 0 here)
    """

    status_code = 429


class CircuitBreakerOpenError(AdmissionRejectedError):
    """
    Raised when the circuit breaker is open (fail fast).

    The circuit moves to half-open once the recovery timeout elapses, at which
    point a trial request is let through.
    """

    status_code = 503
