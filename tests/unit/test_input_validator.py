"""
Unit tests for InputValidator.
"""

import pytest

from src.core.exceptions import ValidationError
from src.core.validation.input_validator import InputValidator


class TestValidateString:
    def test_value_is_trimmed(self):
        assert InputValidator.validate_string("  alice ", "username") == "alice"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n"])
    def test_blank_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_string(value, "username")

        assert exc_info.value.message == "Username cannot be empty"
        assert exc_info.value.field == "username"

    def test_none_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_string(None, "license")

        assert exc_info.value.message == "License is required"


class TestValidateInteger:
    def test_accepts_value_at_minimum(self):
        assert InputValidator.validate_integer(1, "days", min_value=1) == 1

    def test_numeric_string_is_converted(self):
        assert InputValidator.validate_integer("30", "days") == 30

    @pytest.mark.parametrize("value", [0, -5])
    def test_below_minimum_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_integer(value, "days", min_value=1)

        assert exc_info.value.message == "Days must be at least 1"

    @pytest.mark.parametrize("value", [True, "thirty", 1.5j])
    def test_non_integer_is_rejected(self, value):
        with pytest.raises(ValidationError):
            InputValidator.validate_integer(value, "days")

    @pytest.mark.parametrize("value", [2.9, 0.5, float("inf"), float("nan")])
    def test_fractional_float_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_integer(value, "days", min_value=1)

        assert exc_info.value.message == f"Days must be a whole number, got '{value}'"

    def test_integral_float_is_converted(self):
        assert InputValidator.validate_integer(3.0, "days", min_value=1) == 3
