"""
Admin slash commands.

Discord layer only: every command forwards its options to the
`CommandDispatcher` and sends back the single notification it returns.
Command and option descriptions come from the static catalog in
`src.features.admin.commands`; integer minimums are declared with
`app_commands.Range` so Discord rejects them before dispatch.

Accepted commands defer the interaction publicly right before the KeyAuth
round-trips and answer through the follow-up webhook. Private errors raised
after that replace the "thinking" message with an ephemeral follow-up.
"""

from typing import Any, Dict

import discord
from discord import app_commands
from discord.ext import commands

from src.bot.base_cog import BaseCog
from src.features.admin.commands import COMMAND_SPECS
from src.features.admin.dispatcher import CommandDispatcher


def _description(command: str) -> str:
    return COMMAND_SPECS[command].description


def _option_descriptions(command: str) -> Dict[str, str]:
    return {option.name: option.description for option in COMMAND_SPECS[command].options}


class AdminCog(BaseCog):
    """KeyAuth management commands, restricted to the admin allow-list."""

    def __init__(self, bot: commands.Bot, dispatcher: CommandDispatcher):
        super().__init__(bot, "AdminCog")
        self.dispatcher = dispatcher

    async def _run(self, interaction: discord.Interaction, command: str, **options: Any):
        deferred = False

        # Runs after the admin and option checks, so rejections reply privately
        async def defer_before_call():
            nonlocal deferred
            deferred = await self.defer(interaction, ephemeral=False)

        notification = await self.dispatcher.dispatch(
            command,
            interaction.user.id,
            options,
            guild_id=interaction.guild_id,
            before_call=defer_before_call,
        )
        if deferred and notification.ephemeral:
            await self.discard_deferred(interaction)
        await self.send_notification(interaction, notification)

    async def cog_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ):
        command = interaction.command.name if interaction.command else "unknown"
        self.logger.error(
            f"App command error in /{command}: {error}",
            exc_info=error,
            extra={"user_id": interaction.user.id},
        )
        await self.send_error(interaction, "❌ Error", f"An error occurred: {error}")

    # ===============================================================
    # User Management
    # ===============================================================

    @app_commands.command(name="user", description=_description("user"))
    @app_commands.describe(**_option_descriptions("user"))
    async def user(self, interaction: discord.Interaction, username: str):
        await self._run(interaction, "user", username=username)

    @app_commands.command(name="ban", description=_description("ban"))
    @app_commands.describe(**_option_descriptions("ban"))
    async def ban(self, interaction: discord.Interaction, username: str):
        await self._run(interaction, "ban", username=username)

    @app_commands.command(name="unban", description=_description("unban"))
    @app_commands.describe(**_option_descriptions("unban"))
    async def unban(self, interaction: discord.Interaction, username: str):
        await self._run(interaction, "unban", username=username)

    @app_commands.command(name="deleteuser", description=_description("deleteuser"))
    @app_commands.describe(**_option_descriptions("deleteuser"))
    async def deleteuser(self, interaction: discord.Interaction, username: str):
        await self._run(interaction, "deleteuser", username=username)

    @app_commands.command(name="resethwid", description=_description("resethwid"))
    @app_commands.describe(**_option_descriptions("resethwid"))
    async def resethwid(self, interaction: discord.Interaction, username: str):
        await self._run(interaction, "resethwid", username=username)

    # ===============================================================
    # License Management
    # ===============================================================

    @app_commands.command(name="createlicense", description=_description("createlicense"))
    @app_commands.describe(**_option_descriptions("createlicense"))
    async def createlicense(
        self,
        interaction: discord.Interaction,
        license: str,
        days: app_commands.Range[int, 1],
    ):
        await self._run(interaction, "createlicense", license=license, days=days)

    @app_commands.command(name="deletelicense", description=_description("deletelicense"))
    @app_commands.describe(**_option_descriptions("deletelicense"))
    async def deletelicense(self, interaction: discord.Interaction, license: str):
        await self._run(interaction, "deletelicense", license=license)

    @app_commands.command(name="uselicense", description=_description("uselicense"))
    @app_commands.describe(**_option_descriptions("uselicense"))
    async def uselicense(self, interaction: discord.Interaction, license: str, username: str):
        await self._run(interaction, "uselicense", license=license, username=username)

    # ===============================================================
    # Subscription Management
    # ===============================================================

    @app_commands.command(name="extendsub", description=_description("extendsub"))
    @app_commands.describe(**_option_descriptions("extendsub"))
    async def extendsub(
        self,
        interaction: discord.Interaction,
        username: str,
        subscription: str,
        days: app_commands.Range[int, 1],
    ):
        await self._run(
            interaction,
            "extendsub",
            username=username,
            subscription=subscription,
            days=days,
        )

    # ===============================================================
    # Statistics
    # ===============================================================

    @app_commands.command(name="stats", description=_description("stats"))
    async def stats(self, interaction: discord.Interaction):
        await self._run(interaction, "stats")

    # ===============================================================
    # Webhooks & Chat Channels
    # ===============================================================

    @app_commands.command(name="setwebhook", description=_description("setwebhook"))
    @app_commands.describe(**_option_descriptions("setwebhook"))
    async def setwebhook(self, interaction: discord.Interaction, webhook: str):
        await self._run(interaction, "setwebhook", webhook=webhook)

    @app_commands.command(name="addchannel", description=_description("addchannel"))
    @app_commands.describe(**_option_descriptions("addchannel"))
    async def addchannel(self, interaction: discord.Interaction, channel: str):
        await self._run(interaction, "addchannel", channel=channel)

    @app_commands.command(name="deletechannel", description=_description("deletechannel"))
    @app_commands.describe(**_option_descriptions("deletechannel"))
    async def deletechannel(self, interaction: discord.Interaction, channel: str):
        await self._run(interaction, "deletechannel", channel=channel)
