"""
Unit tests for KeyAuthClient.

Covers lazy session acquisition, the local fallback id, form composition,
response decoding and transport failures.
"""

import asyncio
import uuid

import aiohttp
import pytest

from src.core.config.settings import KeyAuthSettings, USER_AGENT
from src.core.exceptions import ConfigurationError, TransportError
from src.keyauth.client import KeyAuthClient
from src.keyauth.models import StatsInfo, UserInfo
from tests.conftest import FakeResponse


def _is_uuid4(value: str) -> bool:
    try:
        return uuid.UUID(value).version == 4
    except ValueError:
        return False


class TestConstruction:
    """Mandatory application settings."""

    def test_missing_name_is_rejected(self):
        with pytest.raises(ConfigurationError):
            KeyAuthClient(KeyAuthSettings(name="", owner_id="owner123"))

    def test_blank_owner_id_is_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            KeyAuthClient(KeyAuthSettings(name="TestApp", owner_id="   "))

        assert exc_info.value.details["config_key"] == "KEYAUTH_OWNER_ID"

    def test_no_request_is_made_on_construction(self, keyauth_settings, http_session):
        client = KeyAuthClient(keyauth_settings, http_session=http_session)

        assert client.session_id is None
        assert http_session.posts == []


@pytest.mark.asyncio
class TestSessionAcquisition:
    """Init handshake and local fallback."""

    async def test_init_form_fields(self, keyauth_client, http_session):
        """Init posts type, ver, name and ownerid."""
        await keyauth_client.get_session_id()

        assert http_session.forms[0] == {
            "type": "init",
            "ver": "2.0",
            "name": "TestApp",
            "ownerid": "owner123",
        }

    async def test_init_runs_once_across_operations(self, keyauth_client, http_session):
        await keyauth_client.ban_user("alice")
        await keyauth_client.unban_user("alice")
        await keyauth_client.get_stats()

        assert http_session.init_count == 1
        assert {form["sessionid"] for form in http_session.request_forms} == {"sess-1"}

    async def test_concurrent_first_calls_share_one_init(self, keyauth_client, http_session):
        results = await asyncio.gather(*(keyauth_client.get_session_id() for _ in range(5)))

        assert set(results) == {"sess-1"}
        assert http_session.init_count == 1

    async def test_fallback_on_http_error(self, keyauth_client, http_session):
        http_session.init_reply = FakeResponse(status=503, reason="Service Unavailable")

        session_id = await keyauth_client.get_session_id()

        assert _is_uuid4(session_id)

    async def test_fallback_on_unsuccessful_init(self, keyauth_client, http_session):
        http_session.init_reply = FakeResponse(body={"success": False, "message": "Application disabled"})

        session_id = await keyauth_client.get_session_id()

        assert _is_uuid4(session_id)

    async def test_fallback_on_network_error(self, keyauth_client, http_session):
        http_session.init_reply = FakeResponse(exc=aiohttp.ClientConnectionError("refused"))

        session_id = await keyauth_client.get_session_id()

        assert _is_uuid4(session_id)

    async def test_fallback_id_is_cached(self, keyauth_client, http_session):
        """The local id is reused; the handshake is never retried."""
        http_session.init_reply = FakeResponse(status=500, reason="Internal Server Error")

        first = await keyauth_client.get_session_id()
        await keyauth_client.ban_user("alice")

        assert http_session.init_count == 1
        assert http_session.request_forms[0]["sessionid"] == first


@pytest.mark.asyncio
class TestRequests:
    """Form composition and response handling."""

    async def test_common_fields_and_headers(self, keyauth_client, http_session):
        await keyauth_client.ban_user("alice")

        post = http_session.posts[-1]
        assert post["url"] == "https://keyauth.win/api/1.3/"
        assert post["data"] == {
            "type": "ban",
            "sessionid": "sess-1",
            "name": "TestApp",
            "ownerid": "owner123",
            "username": "alice",
        }
        assert post["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
        assert post["headers"]["User-Agent"] == USER_AGENT

    @pytest.mark.parametrize(
        "method, args, expected",
        [
            ("delete_user", ("bob",), {"type": "deleteuser", "username": "bob"}),
            ("reset_hwid", ("bob",), {"type": "resetuser", "username": "bob"}),
            ("create_license", ("ABC-123", 30), {"type": "add", "key": "ABC-123", "days": "30"}),
            ("delete_license", ("ABC-123",), {"type": "delete", "key": "ABC-123"}),
            ("use_license", ("ABC-123", "bob"), {"type": "use", "key": "ABC-123", "username": "bob"}),
            (
                "extend_subscription",
                ("bob", "premium", 7),
                {"type": "extend", "username": "bob", "subscription": "premium", "days": "7"},
            ),
            ("set_webhook", ("https://example.com/hook",), {"type": "webhook", "webhook": "https://example.com/hook"}),
            ("add_channel", ("general",), {"type": "addchannel", "channel": "general"}),
            ("delete_channel", ("general",), {"type": "deletechannel", "channel": "general"}),
        ],
    )
    async def test_operation_type_and_fields(self, keyauth_client, http_session, method, args, expected):
        await getattr(keyauth_client, method)(*args)

        form = http_session.request_forms[-1]
        for key, value in expected.items():
            assert form[key] == value

    async def test_success_false_is_returned_not_raised(self, keyauth_client, http_session):
        http_session.queue({"success": False, "message": "User not found"})

        result = await keyauth_client.ban_user("ghost")

        assert result.success is False
        assert result.message == "User not found"

    async def test_user_info_is_decoded(self, keyauth_client, http_session):
        http_session.queue({
            "success": True,
            "info": {"username": "alice", "ip": "1.2.3.4", "subscriptions": [{"subscription": "default"}]},
        })

        result = await keyauth_client.get_user_info("alice")

        assert isinstance(result.info, UserInfo)
        assert result.info.username == "alice"
        assert result.info.hwid is None
        assert result.info.subscriptions[0].subscription == "default"

    async def test_stats_info_is_decoded(self, keyauth_client, http_session):
        http_session.queue({"success": True, "info": {"users": 42, "licenses": 10, "online": 3}})

        result = await keyauth_client.get_stats()

        assert result.info == StatsInfo(users=42, licenses=10, online=3)

    async def test_empty_info_object_is_decoded(self, keyauth_client, http_session):
        http_session.queue({"success": True, "info": {}})
        http_session.queue({"success": True, "info": {}})

        stats = await keyauth_client.get_stats()
        user = await keyauth_client.get_user_info("alice")

        assert stats.info == StatsInfo()
        assert user.info == UserInfo()

    async def test_http_error_raises_transport_error(self, keyauth_client, http_session):
        http_session.queue(status=500, reason="Internal Server Error")

        with pytest.raises(TransportError) as exc_info:
            await keyauth_client.ban_user("alice")

        assert exc_info.value.status_code == 500
        assert "HTTP 500" in exc_info.value.message

    async def test_network_error_raises_transport_error(self, keyauth_client, http_session):
        http_session.queue(exc=aiohttp.ClientConnectionError("connection reset"))

        with pytest.raises(TransportError) as exc_info:
            await keyauth_client.ban_user("alice")

        assert "connection reset" in exc_info.value.message

    async def test_timeout_raises_transport_error(self, keyauth_client, http_session):
        http_session.queue(exc=asyncio.TimeoutError())

        with pytest.raises(TransportError) as exc_info:
            await keyauth_client.ban_user("alice")

        assert exc_info.value.message.endswith("TimeoutError")

    async def test_non_object_body_raises_transport_error(self, keyauth_client, http_session):
        http_session.queue(["not", "an", "object"])

        with pytest.raises(TransportError):
            await keyauth_client.ban_user("alice")

    async def test_undecodable_body_raises_transport_error(self, keyauth_client, http_session):
        http_session.queue(ValueError("Expecting value"))

        with pytest.raises(TransportError):
            await keyauth_client.ban_user("alice")


@pytest.mark.asyncio
class TestClose:
    async def test_injected_session_is_not_closed(self, keyauth_settings, http_session):
        client = KeyAuthClient(keyauth_settings, http_session=http_session)

        await client.close()

        assert http_session.closed is False
