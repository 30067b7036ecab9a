"""
Immutable configuration objects injected into the client and dispatcher.

Both are built once at startup (see `Config.admin_set()` and
`Config.keyauth_settings()`) and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable

USER_AGENT = "KeyAuth-Discord-Bot/1.0"


@dataclass(frozen=True, slots=True)
class AdminSet:
    """Discord user ids allowed to run admin commands."""

    ids: FrozenSet[str] = frozenset()

    @classmethod
    def from_csv(cls, raw: str | None) -> "AdminSet":
        """
        Parse a comma-separated id list, trimming whitespace and dropping blanks.

        >>> AdminSet.from_csv(" 1, 2,,3 ").ids == frozenset({"1", "2", "3"})
        True
        """
        return cls.of((raw or "").split(","))

    @classmethod
    def of(cls, ids: Iterable[Any]) -> "AdminSet":
        return cls(frozenset(str(i).strip() for i in ids if str(i).strip()))

    def is_admin(self, user_id: Any) -> bool:
        return str(user_id).strip() in self.ids

    def __contains__(self, user_id: Any) -> bool:
        return self.is_admin(user_id)

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True, slots=True)
class KeyAuthSettings:
    """Static KeyAuth application settings."""

    name: str
    owner_id: str
    version: str = "2.0"
    url: str = "https://keyauth.win/api/1.3/"
    user_agent: str = USER_AGENT
    timeout_seconds: float = 30.0
