"""
Exception hierarchy for the KeyAuth admin bot.

Purpose
-------
Define the structured exceptions raised while handling an admin command:
authorization failures, invalid arguments, upstream transport failures,
upstream application errors, and fatal configuration problems.

Design Notes
------------
- All exceptions inherit from `KeyAuthBotException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `error_code`: short, stable identifier for programmatic use
- `AuthorizationError`, `ValidationError`, `TransportError` and
  `ApplicationError` are converted into a single notification by the command
  dispatcher. `ConfigurationError` is fatal and stops startup.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"
    INFO = "info"  # Normal operation (e.g., validation failures)
    WARNING = "warning"  # Concerning but handled (e.g., upstream down)
    ERROR = "error"
    CRITICAL = "critical"  # Process cannot start


class KeyAuthBotException(Exception):
    """
    Base exception for all bot-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        error_code: Optional code for programmatic handling

    Example:
        >>> raise KeyAuthBotException(
        ...     "Upstream rejected request",
        ...     {"type": "ban"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}"
            ")"
        )


class AuthorizationError(KeyAuthBotException):
    """
    Raised when the invoking Discord user is not on the admin allow-list.

    Args:
        user_id: Discord id of the caller
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING

    def __init__(self, user_id: Any) -> None:
        self.user_id = str(user_id)
        super().__init__(
            "You do not have permission to use this bot.",
            details={"user_id": self.user_id},
            error_code="ACCESS_DENIED",
        )


class ValidationError(KeyAuthBotException):
    """
    Raised when a command argument is missing, empty, or out of range.

    Args:
        field: Name of the option that failed validation
        message: Explanation of why validation failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.validation_message = message
        super().__init__(
            message,
            details={"field": field},
            error_code=f"VALIDATION_{field.upper()}",
        )


class TransportError(KeyAuthBotException):
    """
    Raised when the KeyAuth endpoint cannot be reached or answers non-2xx.

    Args:
        message: Description of the failure
        status_code: HTTP status when the server answered, else None
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(
            message,
            details={"status_code": status_code} if status_code is not None else None,
            error_code="KEYAUTH_TRANSPORT",
        )


class ApplicationError(KeyAuthBotException):
    """
    Raised when KeyAuth answered but reported `success=false`.

    Args:
        message: Upstream message, or a per-command fallback
        request_type: KeyAuth request type that failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO

    def __init__(self, message: str, request_type: Optional[str] = None) -> None:
        self.request_type = request_type
        super().__init__(
            message,
            details={"type": request_type} if request_type else None,
            error_code="KEYAUTH_APPLICATION",
        )


class ConfigurationError(KeyAuthBotException):
    """
    Raised when a mandatory configuration key is missing or invalid.

    This prevents the process from starting.

    Args:
        config_key: The configuration key that has issues
        message: Description of the configuration problem
    """

    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL

    def __init__(self, config_key: str, message: str) -> None:
        self.config_key = config_key
        super().__init__(
            f"Configuration error for {config_key}: {message}",
            details={"config_key": config_key, "message": message},
            error_code="CONFIG_ERROR",
        )


def get_error_severity(exc: Exception) -> ErrorSeverity:
    """Get the severity level of an exception for logging."""
    if isinstance(exc, KeyAuthBotException):
        return exc.severity
    return ErrorSeverity.ERROR


def should_alert(exc: Exception) -> bool:
    """True if the exception is ERROR or CRITICAL."""
    return get_error_severity(exc) in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)


__all__ = [
    "ErrorSeverity",
    "KeyAuthBotException",
    "AuthorizationError",
    "ValidationError",
    "TransportError",
    "ApplicationError",
    "ConfigurationError",
    "get_error_severity",
    "should_alert",
]
