"""
Exception Module

Structured exception hierarchy for the SRE monitor service.

Module Structure:
-----------------
- **base.py**: SREMonitorError base class + ConfigurationError
- **admission.py**: Rate limit and circuit breaker refusals
- **health.py**: Health probe failures
- **handler.py**: Downstream request handling failures

Usage:
------
```python
from sre_monitor.core.exceptions import CircuitBreakerOpenError, RateLimitExceededError
```
"""

from sre_monitor.core.exceptions.admission import (
    AdmissionRejectedError,
    CircuitBreakerOpenError,
    RateLimitExceededError,
)
from sre_monitor.core.exceptions.base import ConfigurationError, SREMonitorError
from sre_monitor.core.exceptions.handler import HandlerFailureError
from sre_monitor.core.exceptions.health import ProbeFailureError

__all__ = [
    # Base
    "SREMonitorError",
    "ConfigurationError",
    # Admission
    "AdmissionRejectedError",
    "RateLimitExceededError",
    "CircuitBreakerOpenError",
    # Health
    "ProbeFailureError",
    # Handler
    "HandlerFailureError",
]
