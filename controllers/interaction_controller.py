"""
Interaction Controller
Handles Discord button presses on timer prompts
"""

import logging

import discord
from discord.ext import commands

from models.reply import Action, Reply
from services.timer_service import TimerService
from utils.message_utils import send_reply

logger = logging.getLogger("timer-discord-bot")


class InteractionController:
    """Controller for handling component interactions (buttons)"""

    def __init__(self, bot: commands.Bot, timer_service: TimerService):
        """
        Initialize the interaction controller.

        Args:
            bot: Discord bot instance
            timer_service: Service driving the per-channel timers
        """
        self.bot = bot
        self.timer_service = timer_service

        # Register event listener
        bot.add_listener(self.on_interaction, "on_interaction")

    async def on_interaction(self, interaction: discord.Interaction):
        """Handle incoming interactions"""
        if interaction.type != discord.InteractionType.component:
            return

        custom_id = (interaction.data or {}).get("custom_id")
        try:
            action = Action(custom_id)
        except ValueError:
            logger.debug(f"Ignoring unknown component {custom_id}")
            return

        try:
            await interaction.response.defer()
        except discord.HTTPException as e:
            logger.error(f"Error acknowledging interaction {custom_id}: {e}")

        reply = await self.handle_action(interaction.channel.id, action)
        await send_reply(interaction.channel, reply)

        logger.info(f"User {interaction.user.name} pressed {action.value} in channel {interaction.channel.id}")

    async def handle_action(self, session_id: int, action: Action) -> Reply:
        """Run the timer transition behind a button"""
        if action is Action.START_TIMER:
            return await self.timer_service.begin_setup(session_id)
        if action is Action.CONFIRM_TIMER:
            return await self.timer_service.confirm(session_id)
        if action is Action.STOP_TIMER:
            return await self.timer_service.stop(session_id)
        return await self.timer_service.logs_reply()
