"""
Pytest Configuration and Fixtures for the KeyAuth Admin Bot Tests
=================================================================

Purpose
-------
Centralized fixtures for the unit test suite.

Responsibilities
----------------
- Test environment variables (set before `src` modules load Config)
- In-memory fake of `aiohttp.ClientSession` recording every posted form
- KeyAuth client, dispatcher and admin allow-list fixtures
- Discord.py mocks for cog testing

Architecture Notes
------------------
- No test touches the network: the fake HTTP session is injected into
  `KeyAuthClient`, and replies are queued per test
- Async tests use pytest-asyncio class markers
"""

from __future__ import annotations

import os
from collections import deque
from typing import Any, Deque, Dict, List, Optional

import pytest


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure test environment before application modules are imported."""
    os.environ.setdefault("DISCORD_TOKEN", "test-token")
    os.environ.setdefault("DISCORD_CLIENT_ID", "123456789012345678")
    os.environ.setdefault("KEYAUTH_NAME", "TestApp")
    os.environ.setdefault("KEYAUTH_OWNER_ID", "owner123")
    os.environ.setdefault("ADMIN_IDS", "111,222")
    os.environ["ENVIRONMENT"] = "testing"
    os.environ["LOG_LEVEL"] = "DEBUG"
    os.environ["LOG_TO_FILE"] = "false"


ADMIN_ID = 111
STRANGER_ID = 999


# ============================================================================
# FAKE HTTP LAYER
# ============================================================================


class FakeResponse:
    """Minimal stand-in for `aiohttp.ClientResponse` used as a context manager."""

    def __init__(self, status: int = 200, body: Any = None, reason: str = "OK", exc: Optional[Exception] = None):
        self.status = status
        self.reason = reason
        self._body = body
        self._exc = exc

    async def json(self, content_type: Optional[str] = "application/json") -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        if self._exc is not None:
            raise self._exc
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeHTTPSession:
    """
    Records posted forms and replays queued responses.

    `init` requests are answered from `init_reply`; every other request pops
    the next queued reply (defaulting to `{"success": true}`).
    """

    def __init__(self):
        self.posts: List[Dict[str, Any]] = []
        self.init_reply: FakeResponse = FakeResponse(body={"success": True, "sessionid": "sess-1"})
        self.replies: Deque[FakeResponse] = deque()
        self.closed = False

    def queue(self, body: Any = None, status: int = 200, reason: str = "OK", exc: Optional[Exception] = None):
        self.replies.append(FakeResponse(status=status, body=body, reason=reason, exc=exc))

    def post(self, url: str, data: Dict[str, str], headers: Dict[str, str]) -> FakeResponse:
        self.posts.append({"url": url, "data": dict(data), "headers": dict(headers)})
        if data.get("type") == "init":
            return self.init_reply
        if self.replies:
            return self.replies.popleft()
        return FakeResponse(body={"success": True})

    @property
    def forms(self) -> List[Dict[str, str]]:
        return [post["data"] for post in self.posts]

    @property
    def init_count(self) -> int:
        return sum(1 for form in self.forms if form.get("type") == "init")

    @property
    def request_forms(self) -> List[Dict[str, str]]:
        return [form for form in self.forms if form.get("type") != "init"]

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================


@pytest.fixture
def http_session() -> FakeHTTPSession:
    return FakeHTTPSession()


@pytest.fixture
def keyauth_settings():
    from src.core.config.settings import KeyAuthSettings

    return KeyAuthSettings(name="TestApp", owner_id="owner123", version="2.0")


@pytest.fixture
def admins():
    from src.core.config.settings import AdminSet

    return AdminSet.of([ADMIN_ID, 222])


@pytest.fixture
def keyauth_client(keyauth_settings, http_session):
    """Real client on top of the fake session; the injected session is never closed by it."""
    from src.keyauth.client import KeyAuthClient

    return KeyAuthClient(keyauth_settings, http_session=http_session)


@pytest.fixture
def dispatcher(keyauth_client, admins):
    from src.features.admin.dispatcher import CommandDispatcher

    return CommandDispatcher(keyauth_client, admins)


# ============================================================================
# DISCORD MOCKS
# ============================================================================


@pytest.fixture
def mock_bot(mocker):
    """Mock Discord bot for cog testing."""
    bot = mocker.MagicMock()
    bot.user = mocker.MagicMock()
    bot.user.id = 123456789012345678
    return bot


@pytest.fixture
def mock_interaction(mocker):
    """
    Mock slash-command interaction from an admin in a guild.

    `calls` records the order of response, follow-up and delete calls.
    """
    interaction = mocker.MagicMock()
    interaction.user.id = ADMIN_ID
    interaction.guild_id = 42
    interaction.calls = []
    interaction.response.is_done = mocker.MagicMock(return_value=False)

    async def defer(**kwargs):
        interaction.calls.append("defer")
        interaction.response.is_done.return_value = True

    async def send_message(**kwargs):
        interaction.calls.append("send_message")
        interaction.response.is_done.return_value = True

    async def followup_send(**kwargs):
        interaction.calls.append("followup")

    async def delete_original_response():
        interaction.calls.append("delete_original")

    interaction.response.defer = mocker.AsyncMock(side_effect=defer)
    interaction.response.send_message = mocker.AsyncMock(side_effect=send_message)
    interaction.followup.send = mocker.AsyncMock(side_effect=followup_send)
    interaction.delete_original_response = mocker.AsyncMock(side_effect=delete_original_response)
    return interaction
