"""
Unit Tests for Admission Control

Rate limit first, circuit breaker second; refusals surface as exceptions.
"""

import pytest

from sre_monitor.core.config.constants import CircuitState
from sre_monitor.core.exceptions import (
    AdmissionRejectedError,
    CircuitBreakerOpenError,
    RateLimitExceededError,
)
from sre_monitor.core.resilience import AdmissionController, CircuitBreaker, RateLimiter


@pytest.fixture
def admission(clock):
    limiter = RateLimiter(window_seconds=60, max_requests=2, clock=clock)
    breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=30, clock=clock)
    return AdmissionController(limiter, breaker)


@pytest.mark.unit
class TestAdmissionController:
    def test_admits_within_limits(self, admission):
        admission.admit("10.0.0.1")
        admission.admit("10.0.0.1")

    def test_rate_limit_refusal(self, admission, clock):
        admission.admit("10.0.0.1")
        clock.advance(20)
        admission.admit("10.0.0.1")

        with pytest.raises(RateLimitExceededError) as exc_info:
            admission.admit("10.0.0.1", request_id="req-1")

        error = exc_info.value
        assert error.status_code == 429
        assert error.request_id == "req-1"
        assert error.details == {"identifier": "10.0.0.1", "limit": 2, "retry_after": 40}

    def test_retry_after_is_at_least_one_second(self, clock):
        limiter = RateLimiter(window_seconds=60, max_requests=1, clock=clock)
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=30, clock=clock)
        admission = AdmissionController(limiter, breaker)
        admission.admit("a")
        clock.advance(59.9999)

        with pytest.raises(RateLimitExceededError) as exc_info:
            admission.admit("a")

        assert exc_info.value.details["retry_after"] == 1

    def test_open_circuit_refusal(self, admission):
        admission.record_outcome(success=False)

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            admission.admit("10.0.0.1")

        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value, AdmissionRejectedError)

    def test_rate_limit_is_checked_before_circuit(self, admission):
        admission.record_outcome(success=False)

        for _ in range(2):
            with pytest.raises(CircuitBreakerOpenError):
                admission.admit("10.0.0.1")

        # Requests refused by the breaker still consumed the quota
        with pytest.raises(RateLimitExceededError):
            admission.admit("10.0.0.1")

    def test_outcomes_drive_the_breaker(self, admission, clock):
        admission.record_outcome(success=False)
        assert admission.circuit_breaker.state == CircuitState.OPEN

        clock.advance(30)
        admission.admit("b")
        admission.record_outcome(success=True)

        assert admission.circuit_breaker.state == CircuitState.CLOSED
