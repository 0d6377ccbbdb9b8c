"""
Health Check Exceptions

Author: System Architect
Date: 2025-12-13
"""

from sre_monitor.core.exceptions.base import SREMonitorError


class ProbeFailureError(SREMonitorError):
    """
    Raised when an individual health probe faults or exceeds its timeout.

    The health checker never propagates this error: the probe is reported as
    unhealthy with the error message and the remaining probes still run.
    """

    pass
