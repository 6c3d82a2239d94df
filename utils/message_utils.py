"""
Message Utilities
Helper functions for splitting messages and rendering timer replies
"""

import logging
from typing import List, Optional

import discord

from models.reply import Action, Reply

logger = logging.getLogger("timer-discord-bot")

MAX_MESSAGE_LENGTH = 2000  # Discord's message limit
VIEW_TIMEOUT_SECONDS = 24 * 60 * 60

BUTTON_STYLES = {
    Action.STOP_TIMER: discord.ButtonStyle.danger,
    Action.CONFIRM_TIMER: discord.ButtonStyle.success,
}


def split_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> list:
    """
    Split a long message into multiple chunks that fit within Discord's limit.

    Args:
        text: The text to split
        max_length: Maximum length of each chunk (default: 2000 for Discord)

    Returns:
        List of message chunks
    """
    if len(text) <= max_length:
        return [text]

    chunks = []
    remaining = text

    while remaining:
        if len(remaining) <= max_length:
            chunks.append(remaining)
            break

        # Prefer splitting between log lines
        split_pos = remaining.rfind('\n', 0, max_length)
        if split_pos <= 0:
            split_pos = max_length

        chunks.append(remaining[:split_pos])
        remaining = remaining[split_pos:].lstrip('\n')

    return chunks


def build_view(actions: List[Action]) -> Optional[discord.ui.View]:
    """
    Build a row of buttons for the given actions.

    Button presses are handled by the interaction controller through their
    custom IDs, so the buttons carry no callbacks of their own.
    """
    if not actions:
        return None

    view = discord.ui.View(timeout=VIEW_TIMEOUT_SECONDS)
    for action in actions:
        view.add_item(discord.ui.Button(
            label=action.label,
            custom_id=action.value,
            style=BUTTON_STYLES.get(action, discord.ButtonStyle.primary),
        ))
    return view


async def send_reply(channel, reply: Reply) -> bool:
    """
    Send a timer reply to a Discord channel, splitting if necessary.

    Buttons are attached to the last chunk only.

    Args:
        channel: Discord channel to send to
        reply: The reply to render

    Returns:
        True if all chunks sent successfully, False otherwise
    """
    chunks = split_message(reply.text)
    last = len(chunks) - 1

    for i, chunk in enumerate(chunks):
        try:
            if i == last and reply.actions:
                await channel.send(chunk, view=build_view(reply.actions))
            else:
                await channel.send(chunk)
        except Exception as e:
            logger.error(f"Error sending message chunk {i}: {e}")
            return False

    return True


async def deliver_reply(bot, session_id: int, reply: Reply) -> bool:
    """
    Send a reply to a session that has no pending Discord event to answer.

    The session ID is the channel ID; the channel is fetched if it is not
    cached.
    """
    if bot is None or bot.is_closed():
        logger.warning(f"Bot not running, dropping reply for session {session_id}")
        return False

    channel = bot.get_channel(session_id)
    if channel is None:
        try:
            channel = await bot.fetch_channel(session_id)
        except discord.DiscordException as e:
            logger.error(f"Could not fetch channel {session_id}: {e}")
            return False

    return await send_reply(channel, reply)
