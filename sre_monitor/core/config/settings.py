#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the SRE
monitor service. Every tunable of the admission layer (rate limiter, circuit
breaker), the metrics collector and the health checker is declared here.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms (reload_settings)

Author: System Architect
Date: 2025-12-05
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitSettings(BaseSettings):
    """
    Sliding-window rate limiting configuration.

    STAGE-1: Rate limiting thresholds
    """

    RATE_LIMIT_WINDOW_SECONDS: float = Field(default=60.0, gt=0, description="Sliding window length")
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100, ge=1, description="Requests allowed per window")
    RATE_LIMIT_CLEANUP_INTERVAL: float = Field(default=60.0, gt=0, description="Seconds between sweeps")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CircuitBreakerSettings(BaseSettings):
    """
    Circuit breaker configuration for fault tolerance.

    STAGE-CB: Circuit breaker thresholds
    """

    CB_FAILURE_THRESHOLD: int = Field(default=5, ge=1, description="Failures before opening circuit")
    CB_RECOVERY_TIMEOUT: float = Field(default=60.0, ge=0, description="Seconds before attempting recovery")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class HealthCheckSettings(BaseSettings):
    """Health probe thresholds."""

    HEALTH_CHECK_DEGRADED_THRESHOLD: float = Field(
        default=0.8, gt=0, le=1, description="Memory usage ratio reported as degraded"
    )
    HEALTH_CHECK_TIMEOUT: float = Field(default=2.0, gt=0, description="Per-probe timeout in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class MetricsSettings(BaseSettings):
    """
    Metrics collector bounds.

    Both limits cap memory: the latency ring keeps only the most recent
    samples and the endpoint map stops growing once the cap is reached.
    """

    METRICS_DURATION_CAPACITY: int = Field(default=10000, ge=1, description="Latency samples kept")
    METRICS_MAX_ENDPOINTS: int = Field(default=100, ge=1, description="Distinct endpoints tracked")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="production",
        description="Application environment"
    )
    APP_NAME: str = Field(default="SRE Monitor", description="Application name")
    APP_VERSION: str = Field(default="2.0.0", description="Application version")

    # API settings
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=3000, description="API port")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from sre_monitor.core.config.settings import get_settings

        settings = get_settings()
        window = settings.rate_limit.RATE_LIMIT_WINDOW_SECONDS
        threshold = settings.circuit_breaker.CB_FAILURE_THRESHOLD
    """

    # Rate limiting
    RATE_LIMIT_WINDOW_SECONDS: float = Field(default=60.0, gt=0, description="Sliding window length")
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100, ge=1, description="Requests allowed per window")
    RATE_LIMIT_CLEANUP_INTERVAL: float = Field(default=60.0, gt=0, description="Seconds between sweeps")

    # Circuit breaker
    CB_FAILURE_THRESHOLD: int = Field(default=5, ge=1, description="Failures before opening circuit")
    CB_RECOVERY_TIMEOUT: float = Field(default=60.0, ge=0, description="Seconds before attempting recovery")

    # Health checks
    HEALTH_CHECK_DEGRADED_THRESHOLD: float = Field(
        default=0.8, gt=0, le=1, description="Memory usage ratio reported as degraded"
    )
    HEALTH_CHECK_TIMEOUT: float = Field(default=2.0, gt=0, description="Per-probe timeout in seconds")

    # Metrics
    METRICS_DURATION_CAPACITY: int = Field(default=10000, ge=1, description="Latency samples kept")
    METRICS_MAX_ENDPOINTS: int = Field(default=100, ge=1, description="Distinct endpoints tracked")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="production",
        description="Application environment"
    )
    APP_NAME: str = Field(default="SRE Monitor", description="Application name")
    APP_VERSION: str = Field(default="2.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=3000, description="API port")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    # Nested configuration views
    @property
    def rate_limit(self) -> 'RateLimitSettings':
        """Get rate limit settings."""
        return RateLimitSettings(
            RATE_LIMIT_WINDOW_SECONDS=self.RATE_LIMIT_WINDOW_SECONDS,
            RATE_LIMIT_MAX_REQUESTS=self.RATE_LIMIT_MAX_REQUESTS,
            RATE_LIMIT_CLEANUP_INTERVAL=self.RATE_LIMIT_CLEANUP_INTERVAL,
        )

    @property
    def circuit_breaker(self) -> 'CircuitBreakerSettings':
        """Get circuit breaker settings."""
        return CircuitBreakerSettings(
            CB_FAILURE_THRESHOLD=self.CB_FAILURE_THRESHOLD,
            CB_RECOVERY_TIMEOUT=self.CB_RECOVERY_TIMEOUT,
        )

    @property
    def health(self) -> 'HealthCheckSettings':
        """Get health check settings."""
        return HealthCheckSettings(
            HEALTH_CHECK_DEGRADED_THRESHOLD=self.HEALTH_CHECK_DEGRADED_THRESHOLD,
            HEALTH_CHECK_TIMEOUT=self.HEALTH_CHECK_TIMEOUT,
        )

    @property
    def metrics(self) -> 'MetricsSettings':
        """Get metrics settings."""
        return MetricsSettings(
            METRICS_DURATION_CAPACITY=self.METRICS_DURATION_CAPACITY,
            METRICS_MAX_ENDPOINTS=self.METRICS_MAX_ENDPOINTS,
        )

    @property
    def logging(self) -> 'LoggingSettings':
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> 'ApplicationSettings':
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.1: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
