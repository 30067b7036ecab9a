"""
Base Discord Cog for the KeyAuth admin bot.

Purpose
-------
Shared plumbing for slash-command cogs: rendering notifications as embeds and
sending them on an interaction whether or not the initial response has
already been used.

Non-Responsibilities
--------------------
- Authorization and validation (handled by CommandDispatcher)
- KeyAuth calls (handled by KeyAuthClient)

Usage Example
-------------
>>> class AdminCog(BaseCog):
>>>     def __init__(self, bot: commands.Bot, dispatcher: CommandDispatcher):
>>>         super().__init__(bot, "AdminCog")
>>>
>>>     @app_commands.command(name="stats")
>>>     async def stats(self, interaction: discord.Interaction):
>>>         notification = await self.dispatcher.dispatch("stats", interaction.user.id)
>>>         await self.send_notification(interaction, notification)
"""

from typing import Optional

import discord
from discord.ext import commands

from src.core.logging.logger import get_logger
from src.ui.embed_builder import EmbedBuilder
from src.ui.notification import Notification


class BaseCog(commands.Cog):
    """Base class for slash-command cogs."""

    def __init__(self, bot: commands.Bot, cog_name: str):
        """
        Args:
            bot: Discord bot instance
            cog_name: Name of the cog, used as logger name
        """
        self.bot = bot
        self.cog_name = cog_name
        self.logger = get_logger(cog_name)

    # ========================================================================
    # USER FEEDBACK UTILITIES
    # ========================================================================

    async def defer(self, interaction: discord.Interaction, ephemeral: bool = False) -> bool:
        """
        Acknowledge the interaction with a "thinking" state before slow work.

        Returns:
            True if the interaction was deferred by this call
        """
        if interaction.response.is_done():
            return False
        try:
            await interaction.response.defer(ephemeral=ephemeral, thinking=True)
        except discord.HTTPException as e:
            self.logger.warning(f"Failed to defer interaction in {self.cog_name}: {e}")
            return False
        return True

    async def discard_deferred(self, interaction: discord.Interaction):
        """Remove the public "thinking" message so a private follow-up can replace it."""
        try:
            await interaction.delete_original_response()
        except discord.HTTPException as e:
            self.logger.warning(f"Failed to delete deferred response in {self.cog_name}: {e}")

    async def send_notification(
        self,
        interaction: discord.Interaction,
        notification: Notification,
    ):
        """Render a notification and send it on the interaction."""
        embed = EmbedBuilder.from_notification(notification)
        await self._safe_send(interaction, embed, ephemeral=notification.ephemeral)

    async def send_error(
        self,
        interaction: discord.Interaction,
        title: str,
        description: str,
        help_text: Optional[str] = None,
    ):
        """Send standardized ephemeral error feedback."""
        embed = EmbedBuilder.error(title=title, description=description, help_text=help_text)
        await self._safe_send(interaction, embed, ephemeral=True)

    async def _safe_send(
        self,
        interaction: discord.Interaction,
        embed: discord.Embed,
        ephemeral: bool = False,
    ):
        """Reply, or follow up when the initial response was already sent."""
        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=ephemeral)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=ephemeral)
        except discord.HTTPException as e:
            self.logger.error(f"Failed to send embed in {self.cog_name}: {e}")
