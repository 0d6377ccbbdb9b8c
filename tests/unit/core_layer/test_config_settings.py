"""
Unit Tests for Configuration Settings

Tests the settings loading, validation, and default values.
"""

import pytest
from pydantic import ValidationError

from sre_monitor.core.config.settings import Settings, get_settings, reload_settings

_ENV_VARS = [
    "ENVIRONMENT",
    "APP_NAME",
    "APP_VERSION",
    "API_PORT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "RATE_LIMIT_WINDOW_SECONDS",
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_CLEANUP_INTERVAL",
    "CB_FAILURE_THRESHOLD",
    "CB_RECOVERY_TIMEOUT",
    "HEALTH_CHECK_DEGRADED_THRESHOLD",
    "HEALTH_CHECK_TIMEOUT",
    "METRICS_MAX_ENDPOINTS",
    "METRICS_DURATION_CAPACITY",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.app.APP_NAME == "SRE Monitor"
        assert settings.app.APP_VERSION == "2.0.0"
        assert settings.app.ENVIRONMENT == "production"
        assert settings.app.API_PORT == 3000
        assert settings.rate_limit.RATE_LIMIT_WINDOW_SECONDS == 60
        assert settings.rate_limit.RATE_LIMIT_MAX_REQUESTS == 100
        assert settings.circuit_breaker.CB_FAILURE_THRESHOLD == 5
        assert settings.circuit_breaker.CB_RECOVERY_TIMEOUT == 60
        assert settings.health.HEALTH_CHECK_DEGRADED_THRESHOLD == 0.8
        assert settings.metrics.METRICS_DURATION_CAPACITY == 10000
        assert settings.metrics.METRICS_MAX_ENDPOINTS == 100
        assert settings.is_development is False

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("RATE_LIMIT_MAX_REQUESTS", "5")
        clean_env.setenv("ENVIRONMENT", "development")

        settings = Settings(_env_file=None)

        assert settings.rate_limit.RATE_LIMIT_MAX_REQUESTS == 5
        assert settings.is_development is True


@pytest.mark.unit
class TestSettingsValidation:
    def test_log_level_is_uppercased(self, clean_env):
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="VERBOSE")

    def test_invalid_environment_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ENVIRONMENT="qa")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("RATE_LIMIT_WINDOW_SECONDS", 0),
            ("RATE_LIMIT_MAX_REQUESTS", 0),
            ("CB_FAILURE_THRESHOLD", 0),
            ("CB_RECOVERY_TIMEOUT", -1),
            ("HEALTH_CHECK_DEGRADED_THRESHOLD", 1.5),
            ("METRICS_DURATION_CAPACITY", 0),
        ],
    )
    def test_out_of_range_values_rejected(self, clean_env, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})


@pytest.mark.unit
class TestSettingsSingleton:
    def test_get_settings_returns_same_instance(self):
        assert get_settings() is get_settings()

    def test_reload_settings_picks_up_environment(self, clean_env):
        clean_env.setenv("CB_FAILURE_THRESHOLD", "7")
        try:
            assert reload_settings().circuit_breaker.CB_FAILURE_THRESHOLD == 7
            assert get_settings().CB_FAILURE_THRESHOLD == 7
        finally:
            clean_env.delenv("CB_FAILURE_THRESHOLD")
            reload_settings()
