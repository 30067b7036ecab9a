"""
KeyAuth Admin Bot - Application Entry Point
===========================================

Bootstrap
---------
- Config validation (fail fast on missing token, client id or KeyAuth app)
- KeyAuth client and command dispatcher construction
- Bot lifecycle management
- Graceful shutdown
"""

import asyncio
import signal
import sys
from typing import Optional

from src.bot.keyauth_bot import KeyAuthBot
from src.core.config.config import Config
from src.core.exceptions import ConfigurationError
from src.core.logging.logger import get_logger, shutdown_logging
from src.features.admin.dispatcher import CommandDispatcher
from src.keyauth.client import KeyAuthClient

logger = get_logger(__name__)


# ============================================================================
# Application Bootstrap
# ============================================================================

def _startup() -> KeyAuthBot:
    """Validate configuration and wire the bot's dependencies."""
    logger.info("========== KEYAUTH BOT INITIALIZATION START ==========")

    # Step 1: Validate configuration early
    Config.validate()
    logger.info("✓ Configuration validated", extra={"config": Config.get_config_summary()})

    # Step 2: KeyAuth client (session is acquired lazily on first command)
    client = KeyAuthClient(Config.keyauth_settings())
    logger.info("✓ KeyAuth client created")

    # Step 3: Dispatcher bound to the admin allow-list
    admins = Config.admin_set()
    dispatcher = CommandDispatcher(client, admins)
    logger.info("✓ Command dispatcher ready (%d admins)", len(admins))

    # Step 4: Bot
    bot = KeyAuthBot(
        client,
        dispatcher,
        guild_id=Config.DISCORD_GUILD_ID,
        application_id=Config.DISCORD_CLIENT_ID,
    )
    logger.info("✓ Bot initialized")

    logger.info("========== INITIALIZATION COMPLETE ==========")
    return bot


# ============================================================================
# Application Shutdown
# ============================================================================

async def _shutdown(bot: Optional[KeyAuthBot]) -> None:
    """Close the bot, which also closes the KeyAuth client."""
    logger.info("========== KEYAUTH BOT SHUTDOWN START ==========")

    if bot and not bot.is_closed():
        try:
            await bot.close()
            logger.info("✓ Bot closed")
        except Exception as exc:
            logger.error(f"Error while closing bot: {exc}", exc_info=True)

    logger.info("========== SHUTDOWN COMPLETE ==========")


# ============================================================================
# Application Entrypoint
# ============================================================================

async def main() -> None:
    """
    Lifecycle:
        1. Validate configuration
        2. Build KeyAuth client, dispatcher and bot
        3. Start bot
        4. Handle shutdown gracefully
    """
    bot: Optional[KeyAuthBot] = None

    try:
        bot = _startup()

        logger.info("Starting KeyAuth admin bot...")
        await bot.start(Config.DISCORD_TOKEN)

    except ConfigurationError as exc:
        logger.critical(f"Configuration validation failed: {exc}")
        sys.exit(1)

    except asyncio.CancelledError:
        logger.warning("Asyncio task cancellation received; shutting down gracefully.")
        raise

    except KeyboardInterrupt:
        logger.info("Manual shutdown via keyboard interrupt.")

    except Exception as exc:
        logger.critical(f"Fatal startup error: {exc}", exc_info=True)
        sys.exit(1)

    finally:
        await _shutdown(bot)


# ============================================================================
# Process Startup
# ============================================================================

def _install_signal_handlers(loop: asyncio.AbstractEventLoop) -> None:
    try:
        loop.add_signal_handler(signal.SIGTERM, loop.stop)
        logger.debug("SIGTERM handler installed")
    except NotImplementedError:
        logger.debug("SIGTERM not supported on this platform (likely Windows)")


def run() -> None:
    """Console-script entrypoint."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    _install_signal_handlers(loop)

    try:
        loop.run_until_complete(main())
    except KeyboardInterrupt:
        logger.info("Bot manually stopped via keyboard interrupt.")
    except Exception as exc:
        logger.critical(f"Startup failure: {exc}", exc_info=True)
        sys.exit(1)
    finally:
        loop.close()
        logger.info("Event loop closed.")
        shutdown_logging()


if __name__ == "__main__":
    run()
