import logging
from datetime import datetime

import pytest

from services.event_log_service import EventLogService, LogAction, LogRecord

START = datetime(2024, 5, 1, 9, 30, 0)
STOP = datetime(2024, 5, 1, 9, 32, 5)


def test_record_format_in_progress():
    record = LogRecord(LogAction.START, "Brew", START)
    assert record.format() == (
        "Запуск | Название: Brew | Начало: 2024-05-01 09:30:00 | Окончание: В процессе"
    )


def test_record_format_stopped():
    record = LogRecord(LogAction.EXPIRE, "Brew", START, STOP)
    assert record.format() == (
        "Истекло | Название: Brew | Начало: 2024-05-01 09:30:00 | Окончание: 2024-05-01 09:32:05"
    )


@pytest.mark.asyncio
async def test_append_writes_one_line_per_record(tmp_path):
    log_file = tmp_path / "timers.log"
    service = EventLogService(str(log_file))

    assert await service.append(LogRecord(LogAction.START, "Brew", START))
    assert await service.append(LogRecord(LogAction.STOP, "Brew", START, STOP))

    lines = log_file.read_text(encoding="utf-8").splitlines(keepends=True)
    assert len(lines) == 2
    assert all(line.endswith("\n") for line in lines)
    assert lines[0].startswith("Запуск | Название: Brew")
    assert lines[1].startswith("Остановлен | Название: Brew")


@pytest.mark.asyncio
async def test_append_failure_is_logged_and_swallowed(tmp_path, caplog):
    service = EventLogService(str(tmp_path / "missing" / "timers.log"))

    with caplog.at_level(logging.ERROR, logger="timer-discord-bot"):
        written = await service.append(LogRecord(LogAction.START, "Brew", START))

    assert written is False
    assert "Error writing timer log" in caplog.text


@pytest.mark.asyncio
async def test_read_missing_and_empty(tmp_path):
    log_file = tmp_path / "timers.log"
    service = EventLogService(str(log_file))

    assert await service.read() is None

    log_file.write_text("", encoding="utf-8")
    assert await service.read() is None


@pytest.mark.asyncio
async def test_read_returns_whole_file(tmp_path):
    log_file = tmp_path / "timers.log"
    service = EventLogService(str(log_file))
    await service.append(LogRecord(LogAction.START, "Tea", START))

    content = await service.read()

    assert content == "Запуск | Название: Tea | Начало: 2024-05-01 09:30:00 | Окончание: В процессе\n"


def test_get_status(tmp_path):
    log_file = tmp_path / "timers.log"
    service = EventLogService(str(log_file))

    assert service.get_status() == (False, str(log_file))
    log_file.write_text("x\n", encoding="utf-8")
    assert service.get_status() == (True, str(log_file))


@pytest.mark.parametrize("name,expected", [
    ("Brew\ncoffee", "Brew coffee"),
    ("Brew\r\ncoffee\r\n", "Brew coffee"),
    ("Tea | green", "Tea / green"),
])
def test_record_name_stays_in_one_field(name, expected):
    line = LogRecord(LogAction.START, name, START).format()

    assert "\n" not in line and "\r" not in line
    assert line.count(" | ") == 3
    assert f"Название: {expected} | " in line


@pytest.mark.asyncio
async def test_multiline_name_writes_one_line(tmp_path):
    log_file = tmp_path / "timers.log"
    service = EventLogService(str(log_file))

    await service.append(LogRecord(LogAction.START, "Brew\ncoffee", START))
    await service.append(LogRecord(LogAction.STOP, "Brew\ncoffee", START, STOP))

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "Запуск | Название: Brew coffee | Начало: 2024-05-01 09:30:00 | Окончание: В процессе",
        "Остановлен | Название: Brew coffee | Начало: 2024-05-01 09:30:00 | Окончание: 2024-05-01 09:32:05",
    ]
