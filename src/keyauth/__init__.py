"""
KeyAuth seller API integration.

- client.py: async client with lazy, single-flight session acquisition
- models.py: ApiResult and the typed `info` variants (UserInfo, StatsInfo)
"""

from src.keyauth.client import KeyAuthClient
from src.keyauth.models import ApiResult, StatsInfo, Subscription, UserInfo

__all__ = [
    "KeyAuthClient",
    "ApiResult",
    "StatsInfo",
    "Subscription",
    "UserInfo",
]
