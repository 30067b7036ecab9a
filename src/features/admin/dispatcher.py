"""
Admin command dispatcher.

Purpose
-------
Turn one slash-command invocation into exactly one `Notification`:

1. Reject callers outside the admin allow-list (no upstream call).
2. Reject unknown commands.
3. Validate required options (no upstream call on failure).
4. Invoke exactly one KeyAuth client operation.
5. Translate the `ApiResult` into a positive or negative notification.

Every exception raised while handling an invocation is converted here;
nothing propagates to discord.py and nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from src.core.config.settings import AdminSet
from src.core.exceptions import (
    ApplicationError,
    AuthorizationError,
    TransportError,
    ValidationError,
    should_alert,
)
from src.core.logging.logger import LogContext, get_logger
from src.core.validation.input_validator import InputValidator
from src.features.admin.commands import (
    COMMAND_SPECS,
    CommandSpec,
    OptionType,
    ResultStyle,
)
from src.keyauth.client import KeyAuthClient
from src.keyauth.models import ApiResult, StatsInfo, UserInfo
from src.ui.notification import Notification, NotificationField

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"
ERROR_TITLE = "❌ Error"

BeforeCall = Callable[[], Awaitable[None]]


@dataclass
class DispatchMetrics:
    commands_executed: int = 0
    commands_failed: int = 0
    commands_denied: int = 0
    errors_unexpected: int = 0


def format_timestamp(value: Optional[str]) -> str:
    """
    Render an upstream time value.

    Epoch seconds become a UTC date; anything else is shown verbatim.

    >>> format_timestamp("1700000000")
    '2023-11-14'
    """
    if value is None or not str(value).strip():
        return NOT_AVAILABLE

    text = str(value).strip()
    try:
        seconds = float(text)
    except ValueError:
        return text

    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError):
        return text


def _or_default(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value)
    return text if text.strip() else default


class CommandDispatcher:
    """
    Dispatches admin commands to the KeyAuth client.

    Args:
        client: KeyAuth client (or any object exposing the same operations)
        admins: Immutable admin allow-list
        specs: Command catalog, defaults to the static one
    """

    def __init__(
        self,
        client: KeyAuthClient,
        admins: AdminSet,
        specs: Mapping[str, CommandSpec] = COMMAND_SPECS,
    ) -> None:
        self._client = client
        self._admins = admins
        self._specs = specs
        self.metrics = DispatchMetrics()

    @property
    def admins(self) -> AdminSet:
        return self._admins

    async def dispatch(
        self,
        command: str,
        caller_id: Any,
        options: Optional[Mapping[str, Any]] = None,
        guild_id: Optional[int] = None,
        before_call: Optional[BeforeCall] = None,
    ) -> Notification:
        """
        Handle one invocation.

        Args:
            command: Slash command name
            caller_id: Discord id of the invoking user
            options: Raw option values keyed by option name
            guild_id: Guild of the interaction, for log context only
            before_call: Awaited once the command is accepted, right before
                the KeyAuth call (the cog defers the interaction here)

        Returns:
            The single notification to show to the caller. Never raises.
        """
        async with LogContext(user_id=caller_id, guild_id=guild_id, command=command):
            try:
                return await self._dispatch(command, caller_id, options or {}, before_call)

            except AuthorizationError as exc:
                self.metrics.commands_denied += 1
                logger.warning("Unauthorized command attempt", extra={"error": exc.to_dict()})
                return Notification.error("❌ Access Denied", exc.message, ephemeral=True)

            except ValidationError as exc:
                self.metrics.commands_failed += 1
                return Notification.error(ERROR_TITLE, exc.message, ephemeral=True)

            except ApplicationError as exc:
                self.metrics.commands_failed += 1
                logger.info("KeyAuth rejected command", extra={"error": exc.to_dict()})
                return Notification.error(ERROR_TITLE, exc.message)

            except TransportError as exc:
                self.metrics.commands_failed += 1
                log = logger.error if should_alert(exc) else logger.warning
                log("KeyAuth transport failure", extra={"error": exc.to_dict()})
                return Notification.error(ERROR_TITLE, f"An error occurred: {exc.message}", ephemeral=True)

            except Exception as exc:
                self.metrics.commands_failed += 1
                self.metrics.errors_unexpected += 1
                logger.error(
                    "Unhandled error while dispatching command",
                    extra={"error": str(exc), "error_type": type(exc).__name__},
                    exc_info=True,
                )
                return Notification.error(
                    ERROR_TITLE,
                    "An unexpected error occurred. The issue has been logged.",
                    ephemeral=True,
                )

    async def _dispatch(
        self,
        command: str,
        caller_id: Any,
        options: Mapping[str, Any],
        before_call: Optional[BeforeCall],
    ) -> Notification:
        if not self._admins.is_admin(caller_id):
            raise AuthorizationError(caller_id)

        spec = self._specs.get(command)
        if spec is None:
            self.metrics.commands_failed += 1
            logger.warning("Unknown command invoked")
            return Notification.error(
                "❌ Unknown Command",
                "This command is not implemented.",
                ephemeral=True,
            )

        values = self.validate_options(spec, options)

        if before_call is not None:
            await before_call()

        operation = getattr(self._client, spec.operation)
        result: ApiResult = await operation(*values.values())

        if not result.success:
            raise ApplicationError(result.message or spec.failure_fallback, request_type=spec.operation)

        notification = self._render_success(spec, values, result)
        self.metrics.commands_executed += 1
        logger.info("Admin command completed", extra={"operation": spec.operation})
        return notification

    @staticmethod
    def validate_options(spec: CommandSpec, options: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate and normalize options in the operation's positional order."""
        values: Dict[str, Any] = {}
        for option in spec.options:
            raw = options.get(option.name)
            if raw is None and not option.required:
                continue
            if option.type is OptionType.INTEGER:
                values[option.name] = InputValidator.validate_integer(
                    raw, option.name, min_value=option.min_value
                )
            else:
                values[option.name] = InputValidator.validate_string(raw, option.name)
        return values

    # ------------------------------------------------------------------ #
    # Result rendering
    # ------------------------------------------------------------------ #

    def _render_success(self, spec: CommandSpec, values: Mapping[str, Any], result: ApiResult) -> Notification:
        title = spec.success_title.format(**values)

        if spec.style is ResultStyle.USER:
            if result.info is None:
                raise ApplicationError(result.message or spec.failure_fallback, request_type=spec.operation)
            info = result.info if isinstance(result.info, UserInfo) else UserInfo.from_payload(result.info)
            return Notification.info(title, fields=self._user_fields(info))

        if spec.style is ResultStyle.STATS:
            if result.info is None:
                raise ApplicationError(result.message or spec.failure_fallback, request_type=spec.operation)
            stats = result.info if isinstance(result.info, StatsInfo) else StatsInfo.from_payload(result.info)
            return Notification.info(title, fields=self._stats_fields(stats))

        description = result.message or spec.success_template.format(**values)
        return Notification.success(title, description)

    @staticmethod
    def _user_fields(info: UserInfo) -> List[NotificationField]:
        fields = [
            NotificationField("Username", _or_default(info.username, NOT_AVAILABLE)),
            NotificationField("IP Address", _or_default(info.ip, NOT_AVAILABLE)),
            NotificationField("HWID", _or_default(info.hwid, NOT_AVAILABLE)),
            NotificationField("Created", format_timestamp(info.createdate)),
            NotificationField("Last Login", format_timestamp(info.lastlogin)),
        ]

        if info.subscriptions:
            blocks = [
                f"**{_or_default(sub.subscription, NOT_AVAILABLE)}**\n"
                f"Key: {_or_default(sub.key, NOT_AVAILABLE)}\n"
                f"Expiry: {format_timestamp(sub.expiry)}"
                for sub in info.subscriptions
            ]
            fields.append(NotificationField("Subscriptions", "\n\n".join(blocks), inline=False))

        return fields

    @staticmethod
    def _stats_fields(stats: StatsInfo) -> List[NotificationField]:
        return [
            NotificationField("Total Users", _or_default(stats.users, "0")),
            NotificationField("Total Licenses", _or_default(stats.licenses, "0")),
            NotificationField("Online Users", _or_default(stats.online, "0")),
        ]
