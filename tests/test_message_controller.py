import pytest
from unittest.mock import MagicMock, AsyncMock
from controllers.message_controller import MessageController
from models.reply import Reply
from services.timer_service import TimerService


def make_message(content, channel_id=555):
    message = MagicMock()
    message.author.name = "TestUser"
    message.content = content
    message.channel = MagicMock()
    message.channel.id = channel_id
    # Mock send as async
    message.channel.send = AsyncMock()
    return message


def make_controller():
    bot = MagicMock()
    bot.command_prefix = "!"
    bot.process_commands = AsyncMock()
    timer_service = MagicMock(spec=TimerService)
    timer_service.handle_text = AsyncMock(return_value=Reply("Введите время в минутах:"))
    controller = MessageController(bot, timer_service)
    return controller, bot, timer_service


@pytest.mark.asyncio
async def test_handle_text_message():
    controller, bot, timer_service = make_controller()
    message = make_message("Brew")

    await controller.on_message(message)

    bot.process_commands.assert_awaited_once_with(message)
    timer_service.handle_text.assert_awaited_once_with(555, "Brew")
    message.channel.send.assert_called_once_with("Введите время в минутах:")


@pytest.mark.asyncio
async def test_commands_are_not_routed_as_text():
    controller, bot, timer_service = make_controller()
    message = make_message("!start")

    await controller.on_message(message)

    bot.process_commands.assert_awaited_once_with(message)
    timer_service.handle_text.assert_not_called()


@pytest.mark.asyncio
async def test_ignores_own_messages():
    controller, bot, timer_service = make_controller()
    message = make_message("Brew")
    message.author = bot.user

    await controller.on_message(message)

    bot.process_commands.assert_not_called()
    timer_service.handle_text.assert_not_called()


@pytest.mark.asyncio
async def test_ignores_empty_messages():
    controller, bot, timer_service = make_controller()
    message = make_message("")

    await controller.handle_user_message(message)

    timer_service.handle_text.assert_not_called()
    message.channel.send.assert_not_called()


@pytest.mark.asyncio
async def test_whitespace_message_is_routed_verbatim():
    controller, bot, timer_service = make_controller()
    message = make_message("   ")

    await controller.handle_user_message(message)

    timer_service.handle_text.assert_awaited_once_with(555, "   ")


def test_registers_event_handler():
    controller, bot, _ = make_controller()
    bot.event.assert_called_once_with(controller.on_message)
