"""
Bot Service
Owns the current Discord bot instance and the switch the run loop obeys
"""

import logging
import os
import asyncio

logger = logging.getLogger("timer-discord-bot")


def token_configured() -> bool:
    """Check whether a Discord token is present in the environment"""
    return bool(os.getenv("DISCORD_BOT_TOKEN"))


def _result(success: bool, message: str) -> dict:
    return {"success": success, "message": message}


class BotService:
    """
    Shared handle on the running bot.

    The run loop in main.py attaches each fresh bot instance here and polls
    ``bot_enabled``; the operations API flips that switch from the health
    server's thread. Expiry notices go through ``bot``, whatever instance is
    attached at the time.
    """

    def __init__(self):
        self.bot = None
        self.loop = None
        self.bot_enabled = True
        self.bot_startup_attempted = False
        self.session_store = None

    def set_session_store(self, session_store):
        """Set the store whose timer statistics are reported"""
        self.session_store = session_store

    def attach(self, bot, loop=None):
        """Make ``bot`` the current instance, running on ``loop``"""
        self.bot = bot
        if loop is not None:
            self.loop = loop
        if bot is not None:
            self.bot_startup_attempted = True

    def detach(self):
        """Forget the current instance once its run has ended"""
        self.bot = None

    @property
    def bot_running(self) -> bool:
        return self.bot is not None and not self.bot.is_closed()

    @property
    def bot_ready(self) -> bool:
        return self.bot_running and self.bot.is_ready()

    async def enable_bot(self) -> dict:
        """Turn the switch on; the run loop starts a new instance"""
        if not token_configured():
            return _result(False, "DISCORD_BOT_TOKEN not configured")
        if self.bot_enabled:
            return _result(True, "Bot is already enabled")

        self.bot_enabled = True
        logger.info("Bot enabled via API")
        return _result(True, "Bot enabled, starting shortly")

    async def disable_bot(self) -> dict:
        """Turn the switch off and close the current instance"""
        if not self.bot_enabled:
            return _result(True, "Bot is already disabled")

        self.bot_enabled = False
        logger.info("Bot disabled via API")

        # Countdowns keep running; their notices are dropped while no bot is attached
        if self.bot_running:
            await self._close_current()
        return _result(True, "Bot disabled")

    async def _close_current(self):
        """Close the attached bot on the loop it runs on"""
        bot = self.bot
        try:
            if self.loop is not None and self.loop.is_running():
                asyncio.run_coroutine_threadsafe(bot.close(), self.loop)
                logger.info("Bot close scheduled on its own loop")
            else:
                await bot.close()
                logger.info("Bot closed")
        except Exception as e:
            logger.error(f"Error closing bot: {e}")

    def get_status(self) -> dict:
        """Get the switch and connection state"""
        return {
            "success": True,
            "bot_enabled": self.bot_enabled,
            "bot_running": self.bot_running,
            "bot_ready": self.bot_ready,
            "bot_startup_attempted": self.bot_startup_attempted,
            "discord_configured": token_configured(),
        }

    def get_health_info(self) -> dict:
        """Get the fields shared by /health and /ready"""
        return {
            "bot_enabled": self.bot_enabled,
            "bot_ready": self.bot_ready,
            "bot_startup_attempted": self.bot_startup_attempted,
            "timers": self.session_store.stats if self.session_store else {},
        }


bot_service = BotService()
