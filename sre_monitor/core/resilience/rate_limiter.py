"""
Rate Limiter

In-process sliding-window admission control keyed by client identifier.

MECHANISM OF ACTION:
-------------------
Each identifier owns an ordered list of the timestamps of its admitted
requests. On every check the list is filtered down to the timestamps that are
still inside the trailing window; if the survivors already fill the quota the
request is refused WITHOUT being recorded (a refused request does not extend
the client's penalty), otherwise the current timestamp is appended.

Unlike a fixed window, the quota is recomputed continuously, so a client can
never burst 2x the limit across a window boundary.

A periodic ``cleanup()`` sweep (scheduled by the composition root) drops
identifiers whose timestamps have all expired, so memory is bounded by the
number of clients active in the last window.

State is per process; replicas do not share quotas.
"""

import threading
import time
from collections.abc import Callable
from typing import Any

from sre_monitor.core.config.constants import Stage
from sre_monitor.core.exceptions import ConfigurationError
from sre_monitor.core.logging.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Sliding-window rate limiter.

    Usage:
        limiter = RateLimiter(window_seconds=60, max_requests=100)

        if not limiter.is_allowed("10.0.0.1"):
            ...  # reject with 429

        # From a periodic task
        limiter.cleanup()
    """

    def __init__(
        self,
        window_seconds: float,
        max_requests: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window_seconds <= 0:
            raise ConfigurationError(
                "Rate limit window must be positive", details={"window_seconds": window_seconds}
            )
        if max_requests < 1:
            raise ConfigurationError(
                "Rate limit must admit at least one request", details={"max_requests": max_requests}
            )

        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        # Guards the read-filter-append sequence so concurrent checks for the
        # same identifier can neither undercount nor lose an append.
        self._lock = threading.Lock()

        logger.info(
            "Rate limiter initialized",
            window_seconds=window_seconds,
            max_requests=max_requests,
            stage=Stage.INITIALIZATION,
        )

    def _valid_timestamps(self, timestamps: list[float], now: float) -> list[float]:
        window_start = now - self.window_seconds
        return [ts for ts in timestamps if ts > window_start]

    def is_allowed(self, identifier: str) -> bool:
        """
        Check whether ``identifier`` may make a request now, recording it if so.

        Returns:
            bool: True if admitted (and counted), False if the window is full
        """
        with self._lock:
            now = self._clock()
            valid = self._valid_timestamps(self._requests.get(identifier, []), now)
            self._requests[identifier] = valid

            if len(valid) >= self.max_requests:
                logger.debug(
                    "Rate limit exceeded",
                    identifier=identifier,
                    count=len(valid),
                    limit=self.max_requests,
                    stage=Stage.RATE_LIMITING,
                )
                return False

            valid.append(now)
            return True

    def remaining(self, identifier: str) -> int:
        """Requests ``identifier`` may still make in the current window."""
        with self._lock:
            now = self._clock()
            valid = self._valid_timestamps(self._requests.get(identifier, []), now)
            return max(self.max_requests - len(valid), 0)

    def retry_after(self, identifier: str) -> float:
        """Seconds until the oldest in-window request of ``identifier`` expires."""
        with self._lock:
            now = self._clock()
            valid = self._valid_timestamps(self._requests.get(identifier, []), now)
            if len(valid) < self.max_requests:
                return 0.0
            return max(valid[0] + self.window_seconds - now, 0.0)

    def cleanup(self) -> int:
        """
        Drop expired timestamps and identifiers with no request left in the window.

        Idempotent: running it twice in a row removes nothing the second time.

        Returns:
            int: Number of identifiers removed
        """
        with self._lock:
            now = self._clock()
            removed = 0
            for identifier in list(self._requests):
                valid = self._valid_timestamps(self._requests[identifier], now)
                if valid:
                    self._requests[identifier] = valid
                else:
                    del self._requests[identifier]
                    removed += 1
            tracked = len(self._requests)

        if removed:
            logger.debug(
                "Rate limiter cleanup complete",
                removed=removed,
                tracked=tracked,
                stage=Stage.MAINTENANCE,
            )
        return removed

    def tracked_identifiers(self) -> list[str]:
        """Identifiers currently tracked, for diagnostics and cleanup checks."""
        with self._lock:
            return list(self._requests)

    def get_stats(self) -> dict[str, Any]:
        """Read-only snapshot for diagnostics."""
        with self._lock:
            return {
                "window_seconds": self.window_seconds,
                "max_requests": self.max_requests,
                "tracked_identifiers": len(self._requests),
                "tracked_requests": sum(len(ts) for ts in self._requests.values()),
            }
