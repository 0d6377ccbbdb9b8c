"""
Configuration Module

Centralized, type-safe configuration for the SRE monitor service.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: System-wide constants, enums and thresholds

Usage:
------
```python
from sre_monitor.core.config import get_settings
from sre_monitor.core.config.constants import CircuitState

settings = get_settings()
threshold = settings.circuit_breaker.CB_FAILURE_THRESHOLD
```

Testing:
-------
```python
import os
from sre_monitor.core.config import reload_settings

os.environ["RATE_LIMIT_MAX_REQUESTS"] = "5"
settings = reload_settings()
assert settings.rate_limit.RATE_LIMIT_MAX_REQUESTS == 5
```
"""

from sre_monitor.core.config.constants import (
    EVENT_LOOP_LAG_DEGRADED_MS,
    EVENT_LOOP_LAG_HEALTHY_MS,
    HEADER_APP_VERSION,
    HEADER_REQUEST_ID,
    CircuitState,
    HealthStatus,
    Stage,
)
from sre_monitor.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "CircuitState",
    "HealthStatus",
    # Thresholds
    "EVENT_LOOP_LAG_HEALTHY_MS",
    "EVENT_LOOP_LAG_DEGRADED_MS",
    # HTTP headers
    "HEADER_REQUEST_ID",
    "HEADER_APP_VERSION",
]
