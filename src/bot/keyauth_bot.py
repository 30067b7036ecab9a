"""
KeyAuth Admin Discord Bot - Main Bot Class

Purpose
-------
Discord integration for the KeyAuth admin commands.

Responsibilities
----------------
- Register the admin cog and sync the slash-command tree
- Log connection events
- Close the KeyAuth client on shutdown

Non-Responsibilities
--------------------
- Authorization, validation and result rendering (CommandDispatcher)
- KeyAuth protocol (KeyAuthClient)
- Configuration loading (Config, done by the entrypoint)

Architecture Notes
------------------
- KeyAuthBot receives the client and dispatcher via its constructor
- Command sync is guild-scoped when a guild id is configured, global otherwise
- Sync failures are logged and never abort startup
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import discord
from discord.ext import commands

from src.core.config.config import Config
from src.core.logging.logger import get_logger
from src.features.admin.cog import AdminCog
from src.features.admin.dispatcher import CommandDispatcher
from src.keyauth.client import KeyAuthClient

logger = get_logger(__name__)


@dataclass
class StartupMetrics:
    total_time_ms: float
    sync_time_ms: float
    commands_registered: int
    sync_scope: str


class KeyAuthBot(commands.Bot):
    """
    Slash-command-only bot exposing KeyAuth admin operations.

    Dependencies (Injected):
    - keyauth: KeyAuth API client, closed with the bot
    - dispatcher: Command dispatcher shared by all admin commands
    """

    def __init__(
        self,
        keyauth: KeyAuthClient,
        dispatcher: CommandDispatcher,
        guild_id: Optional[int] = None,
        application_id: Optional[int] = None,
    ) -> None:
        self._keyauth = keyauth
        self._dispatcher = dispatcher
        self._guild_id = guild_id

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=discord.Intents.default(),
            help_command=None,
            description=Config.BOT_DESCRIPTION,
            application_id=application_id,
        )

        self.startup_metrics: Optional[StartupMetrics] = None
        self.bot_ready: bool = False

        logger.debug("KeyAuthBot initialized")

    @property
    def keyauth(self) -> KeyAuthClient:
        return self._keyauth

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    # --------------------------------------------------------------- #
    # Startup
    # --------------------------------------------------------------- #

    async def setup_hook(self) -> None:
        startup_start = time.perf_counter()
        logger.info("=" * 60)
        logger.info("KEYAUTH BOT SETUP")
        logger.info("=" * 60)

        try:
            await self.add_cog(AdminCog(self, self._dispatcher))
            logger.info("✓ Admin cog loaded (%d commands)", len(self.tree.get_commands()))

            sync_start = time.perf_counter()
            scope = await self._sync_commands()
            sync_time = (time.perf_counter() - sync_start) * 1000

            self.startup_metrics = StartupMetrics(
                total_time_ms=(time.perf_counter() - startup_start) * 1000,
                sync_time_ms=sync_time,
                commands_registered=len(self.tree.get_commands()),
                sync_scope=scope,
            )
            self._log_startup_summary()

        except Exception as exc:
            logger.critical(
                "Bot setup failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
                exc_info=True,
            )
            raise

    async def _sync_commands(self) -> str:
        """Sync commands to the configured guild, or globally. Returns the scope used."""
        try:
            if self._guild_id:
                guild = discord.Object(id=self._guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info("✓ %d commands synced to guild %s", len(synced), self._guild_id)
                return f"guild:{self._guild_id}"

            synced = await self.tree.sync()
            logger.info("✓ %d commands synced globally", len(synced))
            return "global"

        except discord.HTTPException as exc:
            logger.error(f"⚠️  Command sync failed: {exc}. Commands may not update.", exc_info=True)
            return "failed"

    def _log_startup_summary(self) -> None:
        m = self.startup_metrics
        logger.info("=" * 60)
        logger.info("🎯 STARTUP COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Total Time:      {m.total_time_ms:.0f}ms")
        logger.info(f"Command Sync:    {m.sync_time_ms:.0f}ms ({m.sync_scope})")
        logger.info(f"Commands:        {m.commands_registered}")
        logger.info(f"Admins:          {len(self._dispatcher.admins)}")
        logger.info("=" * 60)

    # --------------------------------------------------------------- #
    # Discord Events
    # --------------------------------------------------------------- #

    async def on_ready(self) -> None:
        """Bot is connected and ready to receive interactions."""
        self.bot_ready = True
        logger.info("=" * 60)
        logger.info("Bot is ONLINE as %s", self.user)
        logger.info("Guilds: %d", len(self.guilds))
        logger.info("Bot ID: %s", getattr(self.user, "id", "unknown"))
        logger.info("=" * 60)

    # --------------------------------------------------------------- #
    # Graceful Shutdown
    # --------------------------------------------------------------- #

    async def close(self) -> None:
        logger.info("=" * 60)
        logger.info("KEYAUTH BOT SHUTDOWN")
        logger.info("=" * 60)

        metrics = self._dispatcher.metrics
        total_commands = metrics.commands_executed + metrics.commands_failed
        if total_commands > 0:
            success_rate = (metrics.commands_executed / total_commands) * 100
            logger.info("Final command statistics:")
            logger.info("  Commands Executed: %d", metrics.commands_executed)
            logger.info("  Commands Failed:   %d", metrics.commands_failed)
            logger.info("  Commands Denied:   %d", metrics.commands_denied)
            logger.info("  Success Rate:      %.1f%%", success_rate)

        try:
            await self._keyauth.close()
            logger.info("✓ KeyAuth client closed")
        except Exception as exc:
            logger.error(f"Error while closing KeyAuth client: {exc}", exc_info=True)

        await super().close()

        logger.info("=" * 60)
        logger.info("✓ Bot shutdown complete")
        logger.info("=" * 60)
