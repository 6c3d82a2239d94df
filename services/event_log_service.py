"""
Event Log Service
Append-only record of timer start and stop events
"""

import os
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

import aiofiles

logger = logging.getLogger("timer-discord-bot")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
IN_PROGRESS = "В процессе"


def log_safe(text: str) -> str:
    """
    Make free text fit in one pipe-delimited field.

    Line breaks become spaces and the field separator becomes '/', so a
    multi-line Discord message still yields exactly one log line.
    """
    return " ".join(text.splitlines()).replace("|", "/")


class LogAction(str, Enum):
    """Kind of event written to the log"""
    START = "Запуск"
    STOP = "Остановлен"
    EXPIRE = "Истекло"


@dataclass
class LogRecord:
    """One start or stop event"""
    action: LogAction
    name: str
    start_time: Optional[datetime]
    stop_time: Optional[datetime] = None

    def format(self) -> str:
        """Render the record as a single log line (without newline)"""
        start = self.start_time.strftime(TIMESTAMP_FORMAT) if self.start_time else ""
        stop = self.stop_time.strftime(TIMESTAMP_FORMAT) if self.stop_time else IN_PROGRESS
        return (
            f"{self.action.value} | Название: {log_safe(self.name)} | "
            f"Начало: {start} | Окончание: {stop}"
        )


class EventLogService:
    def __init__(self, file_path: str = "timers.log"):
        self.file_path = file_path

    def get_file_path(self) -> str:
        """Get the configured file path"""
        return self.file_path

    async def append(self, record: LogRecord) -> bool:
        """
        Append one record to the log file.

        Write failures are logged and swallowed so the timer transition that
        produced the record still completes.

        Returns:
            True if the line was written
        """
        entry = record.format() + "\n"
        try:
            async with aiofiles.open(self.file_path, mode='a', encoding='utf-8') as f:
                await f.write(entry)
        except OSError as e:
            logger.error(f"Error writing timer log {self.file_path}: {e}")
            return False
        logger.debug(f"Logged: {entry.rstrip()}")
        return True

    async def read(self) -> Optional[str]:
        """Read the whole log, or None if it is missing or empty"""
        if not os.path.exists(self.file_path):
            return None

        try:
            async with aiofiles.open(self.file_path, mode='r', encoding='utf-8') as f:
                content = await f.read()
        except OSError as e:
            logger.error(f"Error reading timer log {self.file_path}: {e}")
            return None

        return content or None

    def get_status(self):
        """Check if the log file exists"""
        return os.path.exists(self.file_path), self.file_path
