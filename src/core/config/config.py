"""
Static configuration management for the KeyAuth admin bot.

Purpose
-------
Provides centralized static configuration loaded from environment variables
(with .env support) and builds the immutable objects injected into the
KeyAuth client and the command dispatcher.

Responsibilities
----------------
- Load configuration from environment variables with .env support
- Provide type-safe access to all static configuration values
- Fail fast on missing mandatory settings (Config.validate)
- Build `AdminSet` and `KeyAuthSettings` for dependency injection
- Track which values came from the environment versus defaults

Non-Responsibilities
--------------------
- Talking to Discord or KeyAuth
- Secrets management (use environment variables)

Environment Variables
---------------------
Required:
- DISCORD_TOKEN: Bot authentication token
- DISCORD_CLIENT_ID: Bot application id
- KEYAUTH_NAME: KeyAuth application name
- KEYAUTH_OWNER_ID: KeyAuth owner id

Optional (with defaults):
- DISCORD_GUILD_ID: Guild for fast command registration (default: global)
- ADMIN_IDS: Comma-separated Discord user ids (default: empty)
- KEYAUTH_VERSION: Protocol version (default: "2.0")
- KEYAUTH_URL: Endpoint (default: https://keyauth.win/api/1.3/)
- KEYAUTH_TIMEOUT_SECONDS: Outbound request timeout (default: 30)
- ENVIRONMENT: Environment type (default: development)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_JSON: Force JSON console logs (default: production only)
- LOG_TO_FILE: Keep a daily rotating log file (default: True)
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from src.core.config.settings import AdminSet, KeyAuthSettings
from src.core.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_KEYAUTH_URL = "https://keyauth.win/api/1.3/"
DEFAULT_KEYAUTH_VERSION = "2.0"


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        >>> Environment.from_string("PRODUCTION") is Environment.PRODUCTION
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            # Structured logger is not initialized yet during bootstrap
            logging.warning(f"Unknown environment '{value}', defaulting to development")
            return cls.DEVELOPMENT


class _ConfigLoadMetrics:
    """
    Tracks which configuration values came from environment variables
    versus defaults, and any parse errors encountered.
    """

    def __init__(self):
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}

    def record_env_load(self, key: str, from_env: bool, default: Any):
        self.env_vars_loaded[key] = from_env
        if not from_env:
            self.defaults_used[key] = default

    def record_validation_error(self, key: str, error: str):
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
        }


class Config:
    """
    Centralized static configuration for the KeyAuth admin bot.

    Values are class attributes, populated by `load()` on import. `validate()`
    is called once by the entrypoint and raises `ConfigurationError` for any
    missing mandatory setting.

    Usage
    -----
    >>> Config.validate()
    >>> client = KeyAuthClient(Config.keyauth_settings())
    >>> dispatcher = CommandDispatcher(client, Config.admin_set())
    """

    _metrics: Optional[_ConfigLoadMetrics] = None

    # =========================================================================
    # Discord Configuration
    # =========================================================================

    DISCORD_TOKEN: str = ""
    DISCORD_CLIENT_ID: Optional[int] = None
    DISCORD_GUILD_ID: Optional[int] = None
    ADMIN_IDS: str = ""

    # =========================================================================
    # KeyAuth Configuration
    # =========================================================================

    KEYAUTH_NAME: str = ""
    KEYAUTH_OWNER_ID: str = ""
    KEYAUTH_VERSION: str = DEFAULT_KEYAUTH_VERSION
    KEYAUTH_URL: str = DEFAULT_KEYAUTH_URL
    KEYAUTH_TIMEOUT_SECONDS: int = 30

    # =========================================================================
    # Environment Configuration
    # =========================================================================

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_TO_FILE: bool = True

    # Logs live at project root
    PROJECT_ROOT = Path(__file__).resolve().parents[3]
    LOGS_DIR = PROJECT_ROOT / "logs"

    # =========================================================================
    # Bot Metadata
    # =========================================================================

    BOT_NAME: str = "KeyAuth Manager"
    BOT_VERSION: str = "1.0.0"
    BOT_DESCRIPTION: str = "Management bot for KeyAuth applications"

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _init_metrics(cls):
        if cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _safe_int(cls, key: str, default: int, min_val: Optional[int] = None) -> int:
        """
        Safely parse integer from environment, falling back to `default`
        when unset, malformed, or below `min_val`.
        """
        cls._init_metrics()

        raw_value = os.getenv(key)
        if raw_value is None:
            cls._metrics.record_env_load(key, False, default)
            return default

        try:
            value = int(raw_value)
        except ValueError:
            error = f"{key}='{raw_value}' is not a valid integer, using default {default}"
            logging.warning(error)
            cls._metrics.record_validation_error(key, error)
            return default

        if min_val is not None and value < min_val:
            error = f"{key}={value} is below minimum {min_val}, using default {default}"
            logging.warning(error)
            cls._metrics.record_validation_error(key, error)
            return default

        cls._metrics.record_env_load(key, True, default)
        return value

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).
        """
        cls._init_metrics()

        raw_value = os.getenv(key)
        if raw_value is None:
            cls._metrics.record_env_load(key, False, default)
            return default

        normalized = raw_value.lower().strip()
        if normalized in {"true", "yes", "1", "on"}:
            value = True
        elif normalized in {"false", "no", "0", "off"}:
            value = False
        else:
            error = f"{key}='{raw_value}' is not a valid boolean, using default {default}"
            logging.warning(error)
            cls._metrics.record_validation_error(key, error)
            return default

        cls._metrics.record_env_load(key, True, default)
        return value

    @classmethod
    def _safe_str(cls, key: str, default: str) -> str:
        """Get a stripped string from environment."""
        cls._init_metrics()

        raw_value = os.getenv(key)
        cls._metrics.record_env_load(key, raw_value is not None, default)
        if raw_value is None:
            return default
        return raw_value.strip()

    @classmethod
    def _safe_optional_int(cls, key: str) -> Optional[int]:
        """Parse an optional integer (Discord snowflake) from environment."""
        cls._init_metrics()

        raw_value = os.getenv(key)
        if raw_value is None or not raw_value.strip():
            cls._metrics.record_env_load(key, False, None)
            return None

        try:
            value = int(raw_value.strip())
        except ValueError:
            error = f"{key}='{raw_value}' is not a valid integer, ignoring"
            logging.warning(error)
            cls._metrics.record_validation_error(key, error)
            return None

        cls._metrics.record_env_load(key, True, None)
        return value

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables.

        Called on module import. Tests call it again after patching the
        environment.
        """
        cls._metrics = _ConfigLoadMetrics()

        cls.DISCORD_TOKEN = cls._safe_str("DISCORD_TOKEN", "")
        cls.DISCORD_CLIENT_ID = cls._safe_optional_int("DISCORD_CLIENT_ID")
        cls.DISCORD_GUILD_ID = cls._safe_optional_int("DISCORD_GUILD_ID")
        cls.ADMIN_IDS = cls._safe_str("ADMIN_IDS", "")

        cls.KEYAUTH_NAME = cls._safe_str("KEYAUTH_NAME", "")
        cls.KEYAUTH_OWNER_ID = cls._safe_str("KEYAUTH_OWNER_ID", "")
        cls.KEYAUTH_VERSION = cls._safe_str("KEYAUTH_VERSION", DEFAULT_KEYAUTH_VERSION) or DEFAULT_KEYAUTH_VERSION
        cls.KEYAUTH_URL = cls._safe_str("KEYAUTH_URL", DEFAULT_KEYAUTH_URL) or DEFAULT_KEYAUTH_URL
        cls.KEYAUTH_TIMEOUT_SECONDS = cls._safe_int("KEYAUTH_TIMEOUT_SECONDS", 30, min_val=1)

        cls.ENVIRONMENT = Environment.from_string(cls._safe_str("ENVIRONMENT", "development")).value
        cls.LOG_LEVEL = cls._safe_str("LOG_LEVEL", "INFO").upper()
        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)
        cls.LOG_TO_FILE = bool(cls._safe_bool("LOG_TO_FILE", True))

        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logging.warning(f"Invalid LOG_LEVEL '{cls.LOG_LEVEL}', using INFO")
            cls.LOG_LEVEL = "INFO"

    @classmethod
    def validate(cls) -> None:
        """
        Reload and validate mandatory configuration.

        Raises
        ------
        ConfigurationError:
            If any mandatory value is missing.
        """
        cls.load()

        required = {
            "DISCORD_TOKEN": cls.DISCORD_TOKEN,
            "DISCORD_CLIENT_ID": cls.DISCORD_CLIENT_ID,
            "KEYAUTH_NAME": cls.KEYAUTH_NAME,
            "KEYAUTH_OWNER_ID": cls.KEYAUTH_OWNER_ID,
        }
        for key, value in required.items():
            if not value:
                cls._metrics.record_validation_error(key, "missing")
                raise ConfigurationError(key, f"{key} environment variable is required")

        logger = logging.getLogger(__name__)
        if not cls.admin_set():
            logger.warning("ADMIN_IDS is empty - every command will be denied")
        if cls.DISCORD_GUILD_ID is None:
            logger.warning("DISCORD_GUILD_ID not set - commands will sync globally")

        logger.info("Configuration loaded", extra=cls._metrics.get_summary())

    # =========================================================================
    # Injected Objects
    # =========================================================================

    @classmethod
    def admin_set(cls) -> AdminSet:
        """Build the admin allow-list from ADMIN_IDS."""
        return AdminSet.from_csv(cls.ADMIN_IDS)

    @classmethod
    def keyauth_settings(cls) -> KeyAuthSettings:
        """Build the KeyAuth client settings."""
        return KeyAuthSettings(
            name=cls.KEYAUTH_NAME,
            owner_id=cls.KEYAUTH_OWNER_ID,
            version=cls.KEYAUTH_VERSION,
            url=cls.KEYAUTH_URL,
            timeout_seconds=float(cls.KEYAUTH_TIMEOUT_SECONDS),
        )

    # =========================================================================
    # Environment Checks & Summary
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT == Environment.PRODUCTION.value

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """
        Get non-sensitive configuration summary for debugging.

        >>> Config.get_config_summary()["discord_token_set"]
        True
        """
        return {
            "environment": cls.ENVIRONMENT,
            "log_level": cls.LOG_LEVEL,
            "bot_version": cls.BOT_VERSION,
            "discord_token_set": bool(cls.DISCORD_TOKEN),
            "discord_client_id": cls.DISCORD_CLIENT_ID,
            "discord_guild_id": cls.DISCORD_GUILD_ID,
            "admin_count": len(cls.admin_set()),
            "keyauth_name": cls.KEYAUTH_NAME,
            "keyauth_version": cls.KEYAUTH_VERSION,
            "keyauth_url": cls.KEYAUTH_URL,
            "keyauth_owner_id_set": bool(cls.KEYAUTH_OWNER_ID),
        }


Config.load()
