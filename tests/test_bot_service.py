import pytest
from unittest.mock import MagicMock, AsyncMock

from models.timer import Timer, TimerState
from services.bot_service import BotService
from services.session_store import SessionStore


@pytest.mark.asyncio
async def test_health_info_reports_timers():
    store = SessionStore()
    await store.put(1, Timer(state=TimerState.RUNNING))
    service = BotService()
    service.set_session_store(store)

    info = service.get_health_info()

    assert info["bot_ready"] is False
    assert info["timers"]["running"] == 1


@pytest.mark.asyncio
async def test_enable_without_token(monkeypatch):
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)
    service = BotService()
    service.bot_enabled = False

    result = await service.enable_bot()

    assert result["success"] is False
    assert service.bot_enabled is False


@pytest.mark.asyncio
async def test_disable_closes_bot():
    service = BotService()
    bot = MagicMock()
    bot.is_closed.return_value = False
    bot.close = AsyncMock()
    service.attach(bot)

    result = await service.disable_bot()

    assert result["success"] is True
    assert service.bot_enabled is False
    bot.close.assert_awaited_once()


def test_status_reflects_bot():
    service = BotService()
    bot = MagicMock()
    bot.is_closed.return_value = False
    bot.is_ready.return_value = True
    service.attach(bot)

    status = service.get_status()

    assert status["bot_running"] is True
    assert status["bot_ready"] is True


@pytest.mark.asyncio
async def test_enable_after_disable(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")
    service = BotService()
    await service.disable_bot()

    result = await service.enable_bot()

    assert result["success"] is True
    assert service.bot_enabled is True
    assert service.get_status()["discord_configured"] is True


def test_attach_and_detach():
    service = BotService()
    assert service.bot_startup_attempted is False

    bot = MagicMock()
    bot.is_closed.return_value = False
    service.attach(bot, loop="loop")
    service.detach()

    assert service.bot is None
    assert service.loop == "loop"
    assert service.bot_startup_attempted is True
    assert service.bot_running is False
