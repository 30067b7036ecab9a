"""
Centralized color palette for Discord embeds.

All colors are Discord-compatible integers (0xRRGGBB format).

Usage:
    >>> from src.ui.colors import ColorPalette
    >>> ColorPalette.for_kind(NotificationKind.ERROR)
    16711680
"""

from src.ui.notification import NotificationKind


class ColorPalette:
    """Base color palette for Discord embeds."""

    DEFAULT = 0x5865F2  # Discord Blurple
    SUCCESS = 0x00FF00
    ERROR = 0xFF0000
    INFO = 0x5865F2

    @classmethod
    def for_kind(cls, kind: NotificationKind) -> int:
        return {
            NotificationKind.SUCCESS: cls.SUCCESS,
            NotificationKind.ERROR: cls.ERROR,
            NotificationKind.INFO: cls.INFO,
        }.get(kind, cls.DEFAULT)


class EmbedLimits:
    """Discord embed limits."""

    TITLE = 256
    DESCRIPTION = 4096
    FIELD_NAME = 256
    FIELD_VALUE = 1024
    FOOTER = 2048
    MAX_FIELDS = 25
    TOTAL = 6000

    @staticmethod
    def truncate(text: str, limit: int, suffix: str = "...") -> str:
        """Truncate text to fit within a Discord limit."""
        if len(text) <= limit:
            return text
        return text[:limit - len(suffix)] + suffix
