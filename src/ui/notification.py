"""
Platform-neutral notification produced for every admin command.

The dispatcher returns exactly one `Notification` per invocation; the cog
renders it with `EmbedBuilder.from_notification`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class NotificationField:
    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True)
class Notification:
    """
    Attributes:
        kind: Drives the embed color
        title: Embed title
        description: Embed description, may be empty
        fields: Ordered embed fields
        ephemeral: Only visible to the invoking admin
    """
    kind: NotificationKind
    title: str
    description: str = ""
    fields: List[NotificationField] = field(default_factory=list)
    ephemeral: bool = False

    @property
    def is_success(self) -> bool:
        return self.kind is NotificationKind.SUCCESS

    def field_value(self, name: str) -> Optional[str]:
        for item in self.fields:
            if item.name == name:
                return item.value
        return None

    @classmethod
    def success(cls, title: str, description: str = "", fields: Optional[List[NotificationField]] = None) -> "Notification":
        return cls(NotificationKind.SUCCESS, title, description, list(fields or []))

    @classmethod
    def info(cls, title: str, description: str = "", fields: Optional[List[NotificationField]] = None) -> "Notification":
        return cls(NotificationKind.INFO, title, description, list(fields or []))

    @classmethod
    def error(cls, title: str, description: str, ephemeral: bool = False) -> "Notification":
        return cls(NotificationKind.ERROR, title, description, [], ephemeral)
