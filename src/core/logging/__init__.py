"""
Logging infrastructure for the KeyAuth admin bot.

This module provides:
- JSON logging in production, colored console logs in development
- ContextVar-based contextual logging (`LogContext`)
- Setup and teardown helpers for the global logging system
"""

from src.core.logging.logger import (
    LogContext,
    LoggerConfig,
    current_log_context,
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "LogContext",
    "current_log_context",
    "LoggerConfig",
]
