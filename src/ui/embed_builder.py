"""
Factory for standardized Discord embeds.

Features:
- Consistent colors per notification kind
- Automatic Discord limits enforcement (title, description, fields)
- Timestamps on every embed
- `from_notification` renders dispatcher output
"""

from __future__ import annotations

from typing import Optional

import discord

from src.ui.colors import ColorPalette, EmbedLimits
from src.ui.notification import Notification


class EmbedBuilder:
    """
    Factory for standardized Discord embeds.

    All embeds automatically include timestamps and enforce Discord limits.
    """

    @staticmethod
    def _base_embed(
        title: str,
        description: str,
        color: int,
        footer: Optional[str] = None
    ) -> discord.Embed:
        """
        Create base embed with automatic limit enforcement.

        Args:
            title: Embed title (max 256 chars)
            description: Embed description (max 4096 chars)
            color: Discord color integer
            footer: Optional footer text (max 2048 chars)
        """
        embed = discord.Embed(
            title=EmbedLimits.truncate(title, EmbedLimits.TITLE),
            description=EmbedLimits.truncate(description, EmbedLimits.DESCRIPTION) or None,
            color=color,
            timestamp=discord.utils.utcnow(),
        )

        if footer:
            embed.set_footer(text=EmbedLimits.truncate(footer, EmbedLimits.FOOTER))

        return embed

    @staticmethod
    def error(title: str, description: str, help_text: Optional[str] = None) -> discord.Embed:
        """Error embeds with optional help text."""
        desc = description
        if help_text:
            desc += f"\n\n💡 **Help:** {help_text}"
        return EmbedBuilder._base_embed(title, desc, ColorPalette.ERROR)

    @staticmethod
    def from_notification(notification: Notification, footer: Optional[str] = None) -> discord.Embed:
        """
        Render a dispatcher notification, truncating fields to Discord limits.

        Field values are also cut to keep the whole embed within
        `EmbedLimits.TOTAL`; fields that no longer fit are dropped.
        """
        embed = EmbedBuilder._base_embed(
            notification.title,
            notification.description,
            ColorPalette.for_kind(notification.kind),
            footer,
        )

        for item in notification.fields[:EmbedLimits.MAX_FIELDS]:
            name = EmbedLimits.truncate(item.name, EmbedLimits.FIELD_NAME)
            remaining = EmbedLimits.TOTAL - len(embed) - len(name)
            if remaining < 4:
                break
            embed.add_field(
                name=name,
                value=EmbedLimits.truncate(item.value, min(EmbedLimits.FIELD_VALUE, remaining)) or "N/A",
                inline=item.inline,
            )

        return embed
