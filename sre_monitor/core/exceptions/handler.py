"""
Request Handling Exceptions

Author: System Architect
Date: 2025-12-13
"""

from sre_monitor.core.exceptions.base import SREMonitorError


class HandlerFailureError(SREMonitorError):
    """
    Raised when downstream request handling faults.

    Recorded as a circuit breaker failure and surfaced to the caller as a
    generic 500; the message is only exposed in the development environment.
    """

    pass
