"""
Admission Control

Combines the rate limiter and the circuit breaker into the single admission
check the HTTP layer performs before handing a request to its handler:

    RateLimiter.is_allowed -> CircuitBreaker.can_execute -> handler

A refusal raises an AdmissionRejectedError subclass; nothing is retried.
"""

import math

from sre_monitor.core.config.constants import Stage
from sre_monitor.core.exceptions import CircuitBreakerOpenError, RateLimitExceededError
from sre_monitor.core.logging.logger import get_logger, log_stage
from sre_monitor.core.resilience.circuit_breaker import CircuitBreaker
from sre_monitor.core.resilience.rate_limiter import RateLimiter

logger = get_logger(__name__)


class AdmissionController:
    """
    Request admission: rate limit first, then the circuit breaker.

    The rate limit is checked first so a client hammering an open circuit is
    still counted against its quota.
    """

    def __init__(self, rate_limiter: RateLimiter, circuit_breaker: CircuitBreaker):
        self.rate_limiter = rate_limiter
        self.circuit_breaker = circuit_breaker

    def admit(self, identifier: str, request_id: str | None = None) -> None:
        """
        Admit a request or raise.

        Raises:
            RateLimitExceededError: The identifier's window is full
            CircuitBreakerOpenError: The circuit is open
        """
        if not self.rate_limiter.is_allowed(identifier):
            retry_after = math.ceil(self.rate_limiter.retry_after(identifier))
            logger.warning(
                "Rate limit exceeded",
                identifier=identifier,
                limit=self.rate_limiter.max_requests,
                stage=Stage.RATE_LIMITING,
            )
            raise RateLimitExceededError(
                "Rate limit exceeded",
                request_id=request_id,
                details={
                    "identifier": identifier,
                    "limit": self.rate_limiter.max_requests,
                    "retry_after": max(retry_after, 1),
                },
            )

        if not self.circuit_breaker.can_execute():
            logger.warning(
                "Circuit breaker is open",
                identifier=identifier,
                stage=Stage.CIRCUIT_CHECK,
            )
            raise CircuitBreakerOpenError(
                "Circuit breaker is open",
                request_id=request_id,
                details={"circuit": self.circuit_breaker.name},
            )

    def record_outcome(self, success: bool) -> None:
        """Feed the outcome of an admitted request back into the breaker."""
        log_stage(logger, Stage.OUTCOME_RECORDING, "Request outcome recorded", level="debug",
                  success=success)
        if success:
            self.circuit_breaker.record_success()
        else:
            self.circuit_breaker.record_failure()
