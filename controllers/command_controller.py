"""
Command Controller
Handles Discord bot commands
"""

import logging

from discord.ext import commands

from services.timer_service import TimerService
from utils.message_utils import send_reply

logger = logging.getLogger("timer-discord-bot")


class CommandController:
    """Controller for handling Discord bot commands"""

    def __init__(self, bot: commands.Bot, timer_service: TimerService):
        """
        Initialize the command controller.

        Args:
            bot: Discord bot instance
            timer_service: Service driving the per-channel timers
        """
        self.bot = bot
        self.timer_service = timer_service

        # Register commands
        self._register_commands()

    def _register_commands(self):
        """Register all bot commands"""
        @self.bot.command(name="ping")
        async def ping(ctx):
            await self.ping(ctx)

        @self.bot.command(name="start")
        async def start(ctx):
            await self.start(ctx)

        @self.bot.command(name="logs")
        async def logs(ctx):
            await self.logs(ctx)

        @self.bot.event
        async def on_command_error(ctx, error):
            await self.on_command_error(ctx, error)

    async def ping(self, ctx):
        """Check if the bot is alive"""
        await ctx.send("Pong! Timer-Discord-Bot is alive.")

    async def start(self, ctx):
        """Show the main menu"""
        await send_reply(ctx.channel, self.timer_service.main_menu())
        logger.info(f"User {ctx.author.name} opened the menu in channel {ctx.channel.id}")

    async def logs(self, ctx):
        """Show the timer event log"""
        reply = await self.timer_service.logs_reply()
        await send_reply(ctx.channel, reply)

    async def on_command_error(self, ctx, error):
        """Handle command errors"""
        if isinstance(error, commands.CommandNotFound):
            logger.debug(f"Unknown command: {error}")
            return
        logger.error(f"Command error: {error}")
        await ctx.send(f"An error occurred: {error}")
