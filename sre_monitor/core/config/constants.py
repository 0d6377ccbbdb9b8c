"""
System Constants and Enumerations

This module defines system-wide constants and enumerations shared by the
admission layer, the monitoring layer and the HTTP surface.

Author: System Architect
Date: 2025-12-05
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Request processing stages used as the ``stage`` field of log events.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    """

    # Main Request Lifecycle
    INITIALIZATION = "0.0_INITIALIZATION"
    RATE_LIMITING = "1.0_RATE_LIMITING"
    CIRCUIT_CHECK = "2.0_CIRCUIT_CHECK"
    REQUEST_HANDLING = "3.0_REQUEST_HANDLING"
    OUTCOME_RECORDING = "4.0_OUTCOME_RECORDING"

    # Cross-Cutting Concerns
    CIRCUIT_BREAKER = "CB_CIRCUIT_BREAKER"
    METRICS = "M_METRICS_COLLECTION"
    HEALTH = "H_HEALTH_CHECK"
    MAINTENANCE = "T_PERIODIC_MAINTENANCE"


# ============================================================================
# Circuit Breaker States
# ============================================================================


class CircuitState(str, Enum):
    """
    Circuit breaker states.

    CLOSED: Normal operation, requests allowed
    OPEN: Failing fast, requests blocked
    HALF_OPEN: Testing recovery, the trial request is allowed
    """

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


# ============================================================================
# Health Status
# ============================================================================


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


# ============================================================================
# Health Thresholds
# ============================================================================

# Event loop lag thresholds (milliseconds)
EVENT_LOOP_LAG_HEALTHY_MS = 100  # < 100ms is healthy
EVENT_LOOP_LAG_DEGRADED_MS = 500  # < 500ms is degraded, otherwise unhealthy

# ============================================================================
# Metrics
# ============================================================================

SUMMARY_QUANTILES = (0.5, 0.9, 0.95, 0.99)
OTHER_ENDPOINT_BUCKET = "__other__"
ERROR_STATUS_THRESHOLD = 400  # Status codes >= 400 count as errors

# ============================================================================
# HTTP Headers
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"
HEADER_APP_VERSION = "X-App-Version"
HEADER_RATE_LIMIT = "X-RateLimit-Limit"
HEADER_RATE_REMAINING = "X-RateLimit-Remaining"
HEADER_RETRY_AFTER = "Retry-After"

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"
