"""Admin feature: KeyAuth management slash commands."""

from src.features.admin.commands import COMMAND_SPECS, CommandSpec, OptionSpec, get_command_spec
from src.features.admin.dispatcher import CommandDispatcher

__all__ = [
    "COMMAND_SPECS",
    "CommandSpec",
    "OptionSpec",
    "get_command_spec",
    "CommandDispatcher",
]
