"""
Unit tests for AdminCog.

Checks that the registered slash-command schema matches the command catalog
and that invocations are forwarded to the dispatcher and answered once.
"""

import discord
import pytest

from src.features.admin.cog import AdminCog
from src.features.admin.commands import COMMAND_SPECS, OptionType
from src.ui.notification import Notification
from tests.conftest import ADMIN_ID


@pytest.fixture
def cog(mock_bot, dispatcher):
    return AdminCog(mock_bot, dispatcher)


class TestCommandSchema:
    """Registered app commands mirror COMMAND_SPECS."""

    def test_every_catalog_command_is_registered(self, cog):
        names = {command.name for command in cog.get_app_commands()}

        assert names == set(COMMAND_SPECS)

    def test_descriptions_match_catalog(self, cog):
        for command in cog.get_app_commands():
            assert command.description == COMMAND_SPECS[command.name].description

    def test_parameters_match_catalog(self, cog):
        for command in cog.get_app_commands():
            spec = COMMAND_SPECS[command.name]
            params = {param.name: param for param in command.parameters}

            assert list(params) == [option.name for option in spec.options]
            for option in spec.options:
                param = params[option.name]
                assert param.required is option.required
                assert param.description == option.description
                if option.type is OptionType.INTEGER:
                    assert param.type is discord.AppCommandOptionType.integer
                else:
                    assert param.type is discord.AppCommandOptionType.string

    @pytest.mark.parametrize("command_name", ["createlicense", "extendsub"])
    def test_days_has_minimum_of_one(self, cog, command_name):
        command = next(c for c in cog.get_app_commands() if c.name == command_name)
        days = next(p for p in command.parameters if p.name == "days")

        assert days.min_value == 1



@pytest.mark.asyncio
class TestInvocation:
    async def test_options_forwarded_to_dispatcher(self, cog, mock_interaction, mocker):
        dispatch = mocker.patch.object(
            cog.dispatcher,
            "dispatch",
            mocker.AsyncMock(return_value=Notification.success("✅ License Created", "done")),
        )

        await cog.createlicense.callback(cog, mock_interaction, "ABC-123", 30)

        dispatch.assert_awaited_once()
        args, kwargs = dispatch.await_args
        assert args == ("createlicense", ADMIN_ID, {"license": "ABC-123", "days": 30})
        assert kwargs["guild_id"] == 42
        assert callable(kwargs["before_call"])

    async def test_single_reply_with_notification_embed(self, cog, mock_interaction, http_session):
        http_session.queue({"success": True, "info": {"users": 42, "licenses": 10, "online": 3}})

        await cog.stats.callback(cog, mock_interaction)

        mock_interaction.followup.send.assert_awaited_once()
        mock_interaction.response.send_message.assert_not_awaited()
        kwargs = mock_interaction.followup.send.await_args.kwargs
        embed = kwargs["embed"]
        assert embed.title == "📊 Application Statistics"
        assert [field.value for field in embed.fields] == ["42", "10", "3"]
        assert kwargs["ephemeral"] is False

    async def test_denied_reply_is_ephemeral(self, cog, mock_interaction, http_session):
        mock_interaction.user.id = 999

        await cog.ban.callback(cog, mock_interaction, "alice")

        kwargs = mock_interaction.response.send_message.await_args.kwargs
        assert kwargs["embed"].title == "❌ Access Denied"
        assert kwargs["ephemeral"] is True
        assert http_session.posts == []

    async def test_followup_used_when_response_already_sent(self, cog, mock_interaction):
        mock_interaction.response.is_done.return_value = True

        await cog.unban.callback(cog, mock_interaction, "alice")

        mock_interaction.response.defer.assert_not_awaited()
        mock_interaction.followup.send.assert_awaited_once()
        mock_interaction.response.send_message.assert_not_awaited()


@pytest.mark.asyncio
class TestDeferral:
    """Accepted commands are deferred before any KeyAuth request."""

    async def test_defer_precedes_keyauth_call_and_followup(self, cog, mock_interaction, http_session, mocker):
        original_post = http_session.post

        def recording_post(url, data, headers):
            mock_interaction.calls.append(f"post:{data['type']}")
            return original_post(url, data, headers)

        mocker.patch.object(http_session, "post", side_effect=recording_post)

        await cog.ban.callback(cog, mock_interaction, "alice")

        assert mock_interaction.calls == ["defer", "post:init", "post:ban", "followup"]
        mock_interaction.response.defer.assert_awaited_once_with(ephemeral=False, thinking=True)
        assert mock_interaction.followup.send.await_args.kwargs["ephemeral"] is False

    async def test_rejected_before_call_is_not_deferred(self, cog, mock_interaction, http_session):
        await cog.ban.callback(cog, mock_interaction, "   ")

        mock_interaction.response.defer.assert_not_awaited()
        assert mock_interaction.calls == ["send_message"]
        assert mock_interaction.response.send_message.await_args.kwargs["ephemeral"] is True
        assert http_session.posts == []

    async def test_denied_caller_is_not_deferred(self, cog, mock_interaction):
        mock_interaction.user.id = 999

        await cog.stats.callback(cog, mock_interaction)

        mock_interaction.response.defer.assert_not_awaited()
        assert mock_interaction.calls == ["send_message"]

    async def test_transport_error_replaces_thinking_message_privately(self, cog, mock_interaction, http_session):
        http_session.queue(status=503, reason="Service Unavailable")

        await cog.stats.callback(cog, mock_interaction)

        assert mock_interaction.calls == ["defer", "delete_original", "followup"]
        kwargs = mock_interaction.followup.send.await_args.kwargs
        assert kwargs["ephemeral"] is True
        assert kwargs["embed"].title == "❌ Error"

    async def test_upstream_rejection_stays_public(self, cog, mock_interaction, http_session):
        http_session.queue({"success": False, "message": "User not found"})

        await cog.ban.callback(cog, mock_interaction, "ghost")

        mock_interaction.delete_original_response.assert_not_awaited()
        kwargs = mock_interaction.followup.send.await_args.kwargs
        assert kwargs["ephemeral"] is False
        assert kwargs["embed"].description == "User not found"

    async def test_failed_defer_falls_back_to_initial_response(self, cog, mock_interaction, mocker):
        response = mocker.MagicMock(status=500, reason="Server Error")
        mock_interaction.response.defer.side_effect = discord.HTTPException(response, "boom")

        await cog.unban.callback(cog, mock_interaction, "alice")

        mock_interaction.response.send_message.assert_awaited_once()
        mock_interaction.followup.send.assert_not_awaited()
