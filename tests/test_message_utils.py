import pytest
from unittest.mock import MagicMock, AsyncMock

import discord

from models.reply import Action, Reply
from utils.message_utils import build_view, deliver_reply, send_reply, split_message


def test_split_short_message():
    assert split_message("hello") == ["hello"]


def test_split_prefers_newlines():
    text = "a" * 15 + "\n" + "b" * 15
    assert split_message(text, max_length=20) == ["a" * 15, "b" * 15]


def test_split_without_newlines():
    assert split_message("x" * 25, max_length=10) == ["x" * 10, "x" * 10, "x" * 5]


@pytest.mark.asyncio
async def test_build_view():
    assert build_view([]) is None

    view = build_view([Action.CONFIRM_TIMER, Action.STOP_TIMER])

    assert [b.custom_id for b in view.children] == ["confirm_timer", "stop_timer"]
    assert [b.label for b in view.children] == ["Запустить", "Остановить таймер"]
    assert view.children[1].style == discord.ButtonStyle.danger


@pytest.mark.asyncio
async def test_send_reply_attaches_buttons_to_last_chunk():
    channel = MagicMock()
    channel.send = AsyncMock()
    text = "\n".join(["line"] * 500)

    assert await send_reply(channel, Reply(text, [Action.STOP_TIMER]))

    calls = channel.send.call_args_list
    assert len(calls) > 1
    assert all("view" not in call.kwargs for call in calls[:-1])
    assert calls[-1].kwargs["view"].children[0].custom_id == "stop_timer"


@pytest.mark.asyncio
async def test_send_reply_failure_returns_false():
    channel = MagicMock()
    channel.send = AsyncMock(side_effect=RuntimeError("forbidden"))

    assert await send_reply(channel, Reply("hi")) is False


@pytest.mark.asyncio
async def test_deliver_reply_uses_cached_channel():
    bot = MagicMock()
    bot.is_closed.return_value = False
    channel = MagicMock()
    channel.send = AsyncMock()
    bot.get_channel.return_value = channel

    assert await deliver_reply(bot, 555, Reply("done"))

    bot.get_channel.assert_called_once_with(555)
    channel.send.assert_called_once_with("done")


@pytest.mark.asyncio
async def test_deliver_reply_fetches_uncached_channel():
    bot = MagicMock()
    bot.is_closed.return_value = False
    bot.get_channel.return_value = None
    channel = MagicMock()
    channel.send = AsyncMock()
    bot.fetch_channel = AsyncMock(return_value=channel)

    assert await deliver_reply(bot, 555, Reply("done"))

    bot.fetch_channel.assert_awaited_once_with(555)


@pytest.mark.asyncio
async def test_deliver_reply_without_bot():
    assert await deliver_reply(None, 555, Reply("done")) is False
