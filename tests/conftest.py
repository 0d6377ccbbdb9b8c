"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sre_monitor.application.container import build_components  # noqa: E402
from sre_monitor.core.config.settings import Settings  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Clock & Settings Fixtures
# ============================================================================


@pytest.fixture
def clock():
    """A fake clock shared by the components under test."""
    return FakeClock()


@pytest.fixture
def settings():
    """
    Settings with small limits so tests can reach them quickly.

    Values are passed explicitly so the environment and any .env file do not
    leak into the tests.
    """
    return Settings(
        ENVIRONMENT="production",
        RATE_LIMIT_WINDOW_SECONDS=60,
        RATE_LIMIT_MAX_REQUESTS=100,
        RATE_LIMIT_CLEANUP_INTERVAL=60,
        CB_FAILURE_THRESHOLD=5,
        CB_RECOVERY_TIMEOUT=60,
        HEALTH_CHECK_DEGRADED_THRESHOLD=1.0,
        HEALTH_CHECK_TIMEOUT=2.0,
        METRICS_DURATION_CAPACITY=10000,
        METRICS_MAX_ENDPOINTS=100,
        LOG_LEVEL="INFO",
        LOG_FORMAT="json",
    )


@pytest.fixture
def dev_settings(settings):
    """Same settings in the development environment."""
    return settings.model_copy(update={"ENVIRONMENT": "development"})


@pytest.fixture
def components(settings, clock):
    """Service components wired to the fake clock."""
    return build_components(settings, clock=clock)
