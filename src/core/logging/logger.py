"""
Logging subsystem for the KeyAuth admin bot.

Purpose
-------
Provide async-safe logging for the bot, offering:

- Structured JSON logs in production, colored human text in development.
- LogContext-based propagation of interaction context via ContextVars
  (user_id, guild_id, command, correlation_id).
- Async-safe logging via a QueueHandler + QueueListener so handlers never
  block the event loop.
- Optional daily rotating file handler under Config.LOGS_DIR.

Public API
----------
- get_logger()
- LogContext (sync + async context manager)
- setup_logging() / shutdown_logging()

Extra fields passed via `logger.info("msg", extra={...})` are merged into the
JSON output.
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import (
    QueueHandler,
    QueueListener,
    TimedRotatingFileHandler,
)
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from src.core.config.config import Config


_request_context: ContextVar[Dict[str, Any]] = ContextVar(
    "request_context",
    default={},
)


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Configuration for the logging subsystem."""

    # %(interaction)s is filled by ContextFilter, empty outside a command
    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-28s |%(interaction)s %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    DAILY_BASENAME: str = "keyauth_bot.json.log"
    DAILY_BACKUP_COUNT: int = 3

    QUEUE_MAX_SIZE: int = 10_000

    QUIET_LOGGERS: Tuple[str, ...] = ("discord", "aiohttp", "asyncio")

    @property
    def is_production(self) -> bool:
        return Config.is_production()

    @property
    def logs_dir(self) -> Path:
        return Path(Config.LOGS_DIR).resolve()

    @property
    def log_level(self) -> int:
        return getattr(logging, str(Config.LOG_LEVEL).upper(), logging.INFO)

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return self.is_production
        return bool(Config.LOG_JSON)

    @property
    def use_colors(self) -> bool:
        if self.use_json:
            return False
        return sys.stdout.isatty()

    @property
    def use_file(self) -> bool:
        return bool(Config.LOG_TO_FILE)


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy the current interaction context onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = _request_context.get({})

        record.user_id = context.get("user_id", "N/A")
        record.guild_id = context.get("guild_id", "N/A")
        record.command = context.get("command", "N/A")
        record.correlation_id = context.get("correlation_id", "N/A")

        if "command" in context:
            record.interaction = (
                f" [/{record.command} user={record.user_id} #{record.correlation_id}]"
            )
        else:
            record.interaction = ""

        return True


class ColoredFormatter(logging.Formatter):
    COLORS: Dict[str, str] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        original = record.levelname
        prefix = self.COLORS.get(original, "")
        reset = self.COLORS["RESET"] if prefix else ""

        if prefix:
            record.levelname = f"{prefix}{original}{reset}"

        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    STANDARD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }

    CONTEXT_ATTRS = {
        "user_id",
        "guild_id",
        "command",
        "correlation_id",
    }

    DERIVED_ATTRS = {"interaction"}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created_dt = datetime.fromtimestamp(record.created, tz=timezone.utc)

        log_data: Dict[str, Any] = {
            "timestamp": created_dt.isoformat(),
            "service": Config.BOT_NAME,
            "version": Config.BOT_VERSION,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                log_data[attr] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {
            key: val
            for key, val in record.__dict__.items()
            if key not in self.STANDARD_ATTRS
            and key not in self.CONTEXT_ATTRS
            and key not in self.DERIVED_ATTRS
            and not key.startswith("_")
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, ensure_ascii=False, default=str)


# ============================================================================
# Queue Handler
# ============================================================================


class DroppingQueueHandler(QueueHandler):
    """Drop records instead of blocking the event loop when the queue is full."""

    def __init__(self, log_queue: "queue.Queue[logging.LogRecord]") -> None:
        super().__init__(log_queue)
        self.dropped = 0

    def enqueue(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            self.dropped += 1
            if self.dropped == 1:
                sys.stderr.write("Logging queue full; dropping log records.\n")


# ============================================================================
# Global Setup
# ============================================================================

_queue_listener: Optional[QueueListener] = None
_queue_handler: Optional[DroppingQueueHandler] = None


def _console_formatter() -> logging.Formatter:
    if LOGGER_CONFIG.use_json:
        return JSONFormatter()
    formatter_cls = ColoredFormatter if LOGGER_CONFIG.use_colors else logging.Formatter
    return formatter_cls(fmt=LOGGER_CONFIG.CONSOLE_FORMAT, datefmt=LOGGER_CONFIG.DATE_FORMAT)


def _build_handlers() -> List[logging.Handler]:
    """Console handler always; a daily JSON file under logs/ when enabled."""
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_console_formatter())
    handlers: List[logging.Handler] = [console]

    if LOGGER_CONFIG.use_file:
        LOGGER_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)
        daily = TimedRotatingFileHandler(
            filename=str(LOGGER_CONFIG.logs_dir / LOGGER_CONFIG.DAILY_BASENAME),
            when="midnight",
            backupCount=LOGGER_CONFIG.DAILY_BACKUP_COUNT,
            encoding="utf-8",
            utc=True,
        )
        daily.setFormatter(JSONFormatter())
        handlers.append(daily)

    for handler in handlers:
        handler.setLevel(LOGGER_CONFIG.log_level)
    return handlers


def setup_logging() -> None:
    """Install the queue-backed handlers on the root logger (idempotent)."""
    global _queue_listener, _queue_handler

    root = logging.getLogger()
    if _queue_handler is not None and _queue_handler in root.handlers:
        return

    root.setLevel(LOGGER_CONFIG.log_level)
    root.handlers.clear()

    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(LOGGER_CONFIG.QUEUE_MAX_SIZE)
    _queue_listener = QueueListener(log_queue, *_build_handlers(), respect_handler_level=True)
    _queue_listener.start()

    _queue_handler = DroppingQueueHandler(log_queue)
    _queue_handler.setLevel(LOGGER_CONFIG.log_level)
    # Context must be captured on the emitting task, not the listener thread
    _queue_handler.addFilter(ContextFilter())
    root.addHandler(_queue_handler)

    for noisy in LOGGER_CONFIG.QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "environment": Config.ENVIRONMENT,
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "file": LOGGER_CONFIG.use_file,
        },
    )


def shutdown_logging() -> None:
    """Flush the queue and detach handlers."""
    global _queue_listener, _queue_handler

    if _queue_handler is None:
        return

    logging.getLogger().removeHandler(_queue_handler)
    dropped = _queue_handler.dropped
    _queue_handler = None

    if _queue_listener is not None:
        _queue_listener.stop()
        for handler in _queue_listener.handlers:
            handler.flush()
            handler.close()
        _queue_listener = None

    if dropped:
        sys.stderr.write(f"Logging dropped {dropped} records.\n")


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Bind interaction context to every record logged inside the block.

    >>> async with LogContext(user_id=1, guild_id=2, command="ban"):
    ...     logger.info("Dispatching")
    """

    def __init__(
        self,
        user_id: Optional[int] = None,
        guild_id: Optional[int] = None,
        command: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.context: Dict[str, Any] = {
            "user_id": str(user_id) if user_id is not None else "N/A",
            "guild_id": str(guild_id) if guild_id is not None else "N/A",
            "command": command or "N/A",
            "correlation_id": correlation_id or str(uuid.uuid4())[:8],
            **extra,
        }
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> "LogContext":
        self._token = _request_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_context.reset(self._token)

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def current_log_context() -> Dict[str, Any]:
    return dict(_request_context.get({}))


# Initialize logging automatically
setup_logging()
