"""
Circuit Breaker

This module implements the process-wide circuit breaker that gates request
handling.

MECHANISM OF ACTION:
-------------------
1.  **State Transitions**:
    - **CLOSED**: The system is healthy. Requests are allowed.
      - On Failure: Failure counter increments.
      - On Success: Failure counter resets to 0.
      - Threshold Reached: If failures >= threshold, state transitions to OPEN.

    - **OPEN**: Requests are refused immediately (fail fast).
      - Recovery: Once ``recovery_timeout`` seconds have elapsed, the next
        admission check transitions the breaker to HALF_OPEN and lets the
        request through.

    - **HALF_OPEN**: Probing mode.
      - On Success: State transitions back to CLOSED and the counter resets.
      - On Failure: A single failed trial re-opens the circuit immediately and
        the recovery timer restarts.

2.  **No retries**: the breaker absorbs failures only by refusing admission.

State lives in this process only; every replica trips independently.
"""

import threading
import time
from collections.abc import Callable
from typing import Any

from sre_monitor.core.config.constants import CircuitState, Stage
from sre_monitor.core.exceptions import ConfigurationError
from sre_monitor.core.logging.logger import get_logger

logger = get_logger(__name__)


class CircuitBreaker:
    """
    A lightweight, thread-safe, in-memory circuit breaker.

    Usage:
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=60)

        if not breaker.can_execute():
            ...  # reject with 503
        try:
            await handle(request)
            breaker.record_success()
        except Exception:
            breaker.record_failure()
            raise
    """

    def __init__(
        self,
        failure_threshold: int,
        recovery_timeout: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "default",
    ):
        if failure_threshold < 1:
            raise ConfigurationError(
                "Failure threshold must be at least 1",
                details={"failure_threshold": failure_threshold},
            )
        if recovery_timeout < 0:
            raise ConfigurationError(
                "Recovery timeout cannot be negative",
                details={"recovery_timeout": recovery_timeout},
            )

        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._next_attempt = clock()
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def next_attempt(self) -> float:
        return self._next_attempt

    def _transition(self, new_state: CircuitState) -> None:
        """Change state and log the transition. Caller holds the lock."""
        old_state = self._state
        self._state = new_state
        log = logger.warning if new_state == CircuitState.OPEN else logger.info
        log(
            f"Circuit '{self.name}' changed state to {new_state.value}",
            from_state=old_state.value,
            to_state=new_state.value,
            failure_count=self._failure_count,
            stage=Stage.CIRCUIT_BREAKER,
        )

    def _trip(self) -> None:
        self._next_attempt = self._clock() + self.recovery_timeout
        if self._state != CircuitState.OPEN:
            self._transition(CircuitState.OPEN)

    def can_execute(self) -> bool:
        """
        Determine if a request should be allowed to proceed.

        Logic:
        1. CLOSED -> True.
        2. OPEN -> True (and HALF_OPEN) once the recovery timeout has elapsed,
           False before that.
        3. HALF_OPEN -> True; only the outcome of the trial changes state.
        """
        with self._lock:
            if self._state == CircuitState.CLOSED:
                return True

            if self._state == CircuitState.OPEN:
                if self._clock() >= self._next_attempt:
                    self._transition(CircuitState.HALF_OPEN)
                    return True
                return False

            return True

    def record_success(self) -> None:
        """
        Called when a request succeeds.

        Action:
        - Reset failure counter to 0.
        - If HALF_OPEN -> CLOSED (the trial succeeded).
        """
        with self._lock:
            self._failure_count = 0
            if self._state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.CLOSED)

    def record_failure(self) -> None:
        """
        Called when request handling fails.

        Action:
        - Increment failure counter.
        - HALF_OPEN -> OPEN immediately.
        - Otherwise, counter >= threshold -> OPEN (re-arms the timer if already OPEN).
        """
        with self._lock:
            self._failure_count += 1

            logger.debug(
                f"Circuit '{self.name}' recorded failure "
                f"({self._failure_count}/{self.failure_threshold})",
                stage=Stage.CIRCUIT_BREAKER,
            )

            if (
                self._state == CircuitState.HALF_OPEN
                or self._failure_count >= self.failure_threshold
            ):
                self._trip()

    def get_state(self) -> dict[str, Any]:
        """Pure read of the breaker state."""
        with self._lock:
            return {"state": self._state.value, "failure_count": self._failure_count}

