"""
KeyAuth response models.

Immutable value objects decoded from the JSON bodies returned by the KeyAuth
seller endpoint. Every remote operation yields an `ApiResult`; operations with
a known payload (`user`, `stats`) decode `info` into a typed variant. Decoding
never fails on missing optional fields.

Usage:
    >>> result = ApiResult.from_payload({"success": True, "info": {"users": 42}})
    >>> StatsInfo.from_payload(result.info).users
    42
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Union


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True or value == 1


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Subscription:
    """
    One subscription attached to a KeyAuth user.

    Attributes:
        subscription: Subscription (level) name
        key: License key that granted it
        expiry: Expiry as returned upstream (usually epoch seconds)
    """
    subscription: Optional[str] = None
    key: Optional[str] = None
    expiry: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Subscription":
        return cls(
            subscription=_optional_str(payload.get("subscription")),
            key=_optional_str(payload.get("key")),
            expiry=_optional_str(payload.get("expiry")),
        )


@dataclass(frozen=True)
class UserInfo:
    """
    Decoded `info` payload of a `user` lookup.

    Attributes:
        username: Account name
        ip: Last known IP address
        hwid: Hardware id bound to the account
        createdate: Creation time as returned upstream
        lastlogin: Last login time as returned upstream
        subscriptions: Active subscriptions, possibly empty
    """
    username: Optional[str] = None
    ip: Optional[str] = None
    hwid: Optional[str] = None
    createdate: Optional[str] = None
    lastlogin: Optional[str] = None
    subscriptions: List[Subscription] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "UserInfo":
        if not isinstance(payload, Mapping):
            return cls()

        raw_subs = payload.get("subscriptions")
        subscriptions = [
            Subscription.from_payload(sub)
            for sub in (raw_subs if isinstance(raw_subs, list) else [])
            if isinstance(sub, Mapping)
        ]

        return cls(
            username=_optional_str(payload.get("username")),
            ip=_optional_str(payload.get("ip")),
            hwid=_optional_str(payload.get("hwid")),
            createdate=_optional_str(payload.get("createdate")),
            lastlogin=_optional_str(payload.get("lastlogin")),
            subscriptions=subscriptions,
        )


@dataclass(frozen=True)
class StatsInfo:
    """Decoded `info` payload of a `stats` call. Values are kept as sent."""
    users: Any = None
    licenses: Any = None
    online: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "StatsInfo":
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            users=payload.get("users"),
            licenses=payload.get("licenses"),
            online=payload.get("online"),
        )


InfoPayload = Union[UserInfo, StatsInfo, Any]


@dataclass(frozen=True)
class ApiResult:
    """
    Uniform result of every KeyAuth operation.

    Attributes:
        success: Upstream `success` flag
        message: Upstream message, None when absent or blank
        info: Operation payload; typed for `user` and `stats`, opaque otherwise
        raw: The JSON object exactly as received
    """
    success: bool
    message: Optional[str] = None
    info: InfoPayload = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ApiResult":
        return cls(
            success=as_bool(payload.get("success")),
            message=_optional_str(payload.get("message")),
            info=payload.get("info"),
            raw=dict(payload),
        )

    def with_info(self, info: InfoPayload) -> "ApiResult":
        return replace(self, info=info)
