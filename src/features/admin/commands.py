"""
Static slash-command catalog for the admin feature.

Each `CommandSpec` names the KeyAuth client operation it drives, the options
it requires (in the positional order the operation expects), and the strings
used to report the outcome. The catalog is built once at import time and is
the single source of truth for both validation in the dispatcher and the
option schema registered by `AdminCog`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class OptionType(str, Enum):
    STRING = "string"
    INTEGER = "integer"


class ResultStyle(str, Enum):
    """How a successful result is turned into a notification."""

    MESSAGE = "message"
    USER = "user"
    STATS = "stats"


@dataclass(frozen=True)
class OptionSpec:
    name: str
    description: str
    type: OptionType = OptionType.STRING
    required: bool = True
    min_value: Optional[int] = None


@dataclass(frozen=True)
class CommandSpec:
    """
    Declarative description of one admin command.

    Attributes:
        name: Slash command name
        description: Slash command description
        operation: KeyAuthClient method invoked with the option values
        options: Options, in the positional order of `operation`
        success_title: Title of the positive notification
        success_template: Description used when upstream sends no message;
            formatted with the validated option values
        failure_fallback: Description used on `success=false` without message
        style: How a successful result is rendered
    """
    name: str
    description: str
    operation: str
    options: Tuple[OptionSpec, ...]
    success_title: str
    success_template: str
    failure_fallback: str
    style: ResultStyle = ResultStyle.MESSAGE

    def option(self, name: str) -> OptionSpec:
        for option in self.options:
            if option.name == name:
                return option
        raise KeyError(name)


def _username(description: str) -> OptionSpec:
    return OptionSpec("username", description)


def _license(description: str) -> OptionSpec:
    return OptionSpec("license", description)


def _days(description: str) -> OptionSpec:
    return OptionSpec("days", description, type=OptionType.INTEGER, min_value=1)


_SPECS: Tuple[CommandSpec, ...] = (
    # User management
    CommandSpec(
        name="user",
        description="Get user information",
        operation="get_user_info",
        options=(_username("The username to look up"),),
        success_title="👤 User: {username}",
        success_template="",
        failure_fallback="User not found",
        style=ResultStyle.USER,
    ),
    CommandSpec(
        name="ban",
        description="Ban a user",
        operation="ban_user",
        options=(_username("The username to ban"),),
        success_title="✅ User Banned",
        success_template="User {username} has been banned.",
        failure_fallback="Failed to ban user",
    ),
    CommandSpec(
        name="unban",
        description="Unban a user",
        operation="unban_user",
        options=(_username("The username to unban"),),
        success_title="✅ User Unbanned",
        success_template="User {username} has been unbanned.",
        failure_fallback="Failed to unban user",
    ),
    CommandSpec(
        name="deleteuser",
        description="Delete a user account",
        operation="delete_user",
        options=(_username("The username to delete"),),
        success_title="✅ User Deleted",
        success_template="User {username} has been deleted.",
        failure_fallback="Failed to delete user",
    ),
    CommandSpec(
        name="resethwid",
        description="Reset a user's HWID",
        operation="reset_hwid",
        options=(_username("The username to reset HWID for"),),
        success_title="✅ HWID Reset",
        success_template="HWID for {username} has been reset.",
        failure_fallback="Failed to reset HWID",
    ),
    # License management
    CommandSpec(
        name="createlicense",
        description="Create a new license key",
        operation="create_license",
        options=(
            _license("The license key to create"),
            _days("Number of days for the license"),
        ),
        success_title="✅ License Created",
        success_template="License {license} created for {days} days.",
        failure_fallback="Failed to create license",
    ),
    CommandSpec(
        name="deletelicense",
        description="Delete a license key",
        operation="delete_license",
        options=(_license("The license key to delete"),),
        success_title="✅ License Deleted",
        success_template="License {license} has been deleted.",
        failure_fallback="Failed to delete license",
    ),
    CommandSpec(
        name="uselicense",
        description="Use a license key for a user",
        operation="use_license",
        options=(
            _license("The license key to use"),
            _username("The username to apply the license to"),
        ),
        success_title="✅ License Applied",
        success_template="License {license} applied to {username}.",
        failure_fallback="Failed to apply license",
    ),
    # Subscription management
    CommandSpec(
        name="extendsub",
        description="Extend a user's subscription",
        operation="extend_subscription",
        options=(
            _username("The username"),
            OptionSpec("subscription", "The subscription name"),
            _days("Number of days to extend"),
        ),
        success_title="✅ Subscription Extended",
        success_template="Subscription {subscription} for {username} extended by {days} days.",
        failure_fallback="Failed to extend subscription",
    ),
    # Statistics
    CommandSpec(
        name="stats",
        description="Get application statistics",
        operation="get_stats",
        options=(),
        success_title="📊 Application Statistics",
        success_template="",
        failure_fallback="Failed to fetch statistics",
        style=ResultStyle.STATS,
    ),
    # Webhooks & chat channels
    CommandSpec(
        name="setwebhook",
        description="Set the application webhook",
        operation="set_webhook",
        options=(OptionSpec("webhook", "The webhook URL"),),
        success_title="✅ Webhook Set",
        success_template="Webhook has been updated.",
        failure_fallback="Failed to set webhook",
    ),
    CommandSpec(
        name="addchannel",
        description="Create a chat channel",
        operation="add_channel",
        options=(OptionSpec("channel", "The chat channel name"),),
        success_title="✅ Channel Added",
        success_template="Channel {channel} has been created.",
        failure_fallback="Failed to add channel",
    ),
    CommandSpec(
        name="deletechannel",
        description="Delete a chat channel",
        operation="delete_channel",
        options=(OptionSpec("channel", "The chat channel name"),),
        success_title="✅ Channel Deleted",
        success_template="Channel {channel} has been deleted.",
        failure_fallback="Failed to delete channel",
    ),
)

COMMAND_SPECS: Mapping[str, CommandSpec] = MappingProxyType({spec.name: spec for spec in _SPECS})


def get_command_spec(name: str) -> Optional[CommandSpec]:
    return COMMAND_SPECS.get(name)
