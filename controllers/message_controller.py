"""
Message Controller
Handles Discord message events and feeds free text into the timer dialog
"""

import logging

import discord
from discord.ext import commands

from services.timer_service import TimerService
from utils.message_utils import send_reply

logger = logging.getLogger("timer-discord-bot")


class MessageController:
    """Controller for handling Discord message events"""

    def __init__(self, bot: commands.Bot, timer_service: TimerService):
        """
        Initialize the message controller.

        Args:
            bot: Discord bot instance
            timer_service: Service driving the per-channel timers
        """
        self.bot = bot
        self.timer_service = timer_service

        # Register event handler
        bot.event(self.on_message)

    async def on_message(self, message: discord.Message):
        """Handle incoming Discord messages"""
        # Ignore messages from the bot itself
        if message.author == self.bot.user:
            return

        # Process commands
        await self.bot.process_commands(message)

        # Handle regular messages (not commands)
        if not message.content.startswith(self.bot.command_prefix):
            await self.handle_user_message(message)

    async def handle_user_message(self, message: discord.Message):
        """Route a free-text message to the session's timer dialog"""
        session_id = message.channel.id
        content = message.content

        if not content:
            return

        reply = await self.timer_service.handle_text(session_id, content)
        await send_reply(message.channel, reply)

        logger.debug(f"Session {session_id} text from {message.author.name}: {content}")
