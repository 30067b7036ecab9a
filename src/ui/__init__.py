"""
UI Subsystem - Discord presentation for admin command results.

Organization:
    - notification: Platform-neutral result produced by the dispatcher
    - colors: Color palette and Discord embed limits
    - embed_builder: Embed factory rendering notifications

Usage Examples:
    >>> from src.ui import EmbedBuilder, Notification
    >>> embed = EmbedBuilder.from_notification(Notification.success("✅ Done", "All good"))
"""

from src.ui.colors import ColorPalette, EmbedLimits
from src.ui.embed_builder import EmbedBuilder
from src.ui.notification import Notification, NotificationField, NotificationKind

__all__ = [
    "ColorPalette",
    "EmbedLimits",
    "EmbedBuilder",
    "Notification",
    "NotificationField",
    "NotificationKind",
]
