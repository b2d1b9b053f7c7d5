"""
Application exceptions for failures that cannot be returned as a ServiceResult.

Services return ServiceResult for expected failures (not found, duplicate
like, closed edit window). Exceptions are for calls that fail underneath a
service, mostly third-party APIs, and are converted back into a
ServiceResult with BaseService.handle_exception().

Exception Hierarchy:
    BaseApplicationError (base)
    └── ExternalServiceError - Google Maps / Firebase failures
        └── CircuitOpenError (core.circuit_breaker) - breaker refusing calls

Usage:
    from core.exceptions import ExternalServiceError

    raise ExternalServiceError(
        "Directions request failed",
        details={"status": "ZERO_RESULTS"},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for application errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code, carried into ServiceResult.error_code
        details: Extra context for logs
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error, do not expose it to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
