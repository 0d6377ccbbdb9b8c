"""
Base Exception Class

This module contains the base exception class that all other exceptions
inherit from, plus ConfigurationError which every component can raise while
validating its constructor arguments.

Author: System Architect
Date: 2025-12-08
"""

from typing import Any


class SREMonitorError(Exception):
    """
    Base exception for all SRE monitor errors.

    Attributes:
        message: Error message
        request_id: Request ID for correlation (if available)
        details: Additional error details (dict)

    Example:
        raise RateLimitExceededError(
            "Rate limit exceeded",
            request_id="9f2c...",
            details={"identifier": "10.0.0.1", "limit": 100}
        )
    """

    def __init__(
        self, message: str, request_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.request_id = request_id
        self.details = (details or {}).copy()  # Copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging/API responses.

        Returns:
            Dict with error_type, message, request_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "request_id": self.request_id,
            "details": self.details,
        }

    def with_context(self, **context) -> "SREMonitorError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        request_id_str = f", request_id='{self.request_id}'" if self.request_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{request_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        request_id: str | None = None,
        **details
    ) -> "SREMonitorError":
        """
        Create an error from another exception, keeping the original type and message.

        Example:
            >>> try:
            ...     await probe.check()
            ... except TimeoutError as e:
            ...     raise ProbeFailureError.from_exception(e, probe="memory")
        """
        error_message = message or str(exc) or exc.__class__.__name__
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, request_id=request_id, details=error_details)


class ConfigurationError(SREMonitorError):
    """Raised when configuration or component parameters are invalid."""
    pass
