"""
Validation utilities for the KeyAuth admin bot.

Provides the stateless checks the dispatcher runs on slash-command options
before any upstream call is made.
"""

from src.core.validation.input_validator import InputValidator

__all__ = [
    "InputValidator",
]
