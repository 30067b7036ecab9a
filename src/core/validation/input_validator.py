"""
Input validation layer for slash-command options.

Purpose
-------
Validate and normalize the options of an admin command before the KeyAuth
client is called. Every failure raises `ValidationError` with a message that
is shown to the admin verbatim, so no upstream request is ever issued with an
empty username or a non-positive day count.

Observability
-------------
Every validation failure is logged at debug level with the field name, the
raw value (repr) and the reason.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

from src.core.exceptions import ValidationError
from src.core.logging.logger import get_logger

logger = get_logger(__name__)


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


def _raise_validation_error(field_name: str, value: Any, message: str) -> NoReturn:
    """Log and raise a ValidationError."""
    logger.debug(
        "Input validation failed",
        extra={
            "field_name": field_name,
            "raw_value": repr(value),
            "reason": message,
        },
    )
    raise ValidationError(field_name, message)


class InputValidator:
    """
    Stateless option validation.

    All methods return the normalized value or raise ValidationError.
    """

    @staticmethod
    def validate_string(value: Any, field_name: str) -> str:
        """
        Trim a required string option and reject empty results.

        >>> InputValidator.validate_string("  alice ", "username")
        'alice'
        """
        if value is None:
            _raise_validation_error(field_name, value, f"{_label(field_name)} is required")

        str_value = str(value).strip()
        if not str_value:
            _raise_validation_error(field_name, value, f"{_label(field_name)} cannot be empty")

        return str_value

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        min_value: Optional[int] = None,
    ) -> int:
        """
        Validate a required integer option with an optional inclusive minimum.

        Booleans are rejected even though they subclass int. Floats are only
        accepted when integral, so 2.9 is an error rather than 2.
        """
        if value is None:
            _raise_validation_error(field_name, value, f"{_label(field_name)} is required")

        if isinstance(value, bool):
            _raise_validation_error(field_name, value, f"{_label(field_name)} must be a whole number")

        if isinstance(value, float) and not value.is_integer():
            _raise_validation_error(
                field_name,
                value,
                f"{_label(field_name)} must be a whole number, got '{value}'",
            )

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            _raise_validation_error(
                field_name,
                value,
                f"{_label(field_name)} must be a whole number, got '{value}'",
            )

        if min_value is not None and int_value < min_value:
            _raise_validation_error(
                field_name,
                int_value,
                f"{_label(field_name)} must be at least {min_value}",
            )

        return int_value
