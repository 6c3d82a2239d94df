"""
Services package for Timer-Discord-Bot
"""

from services.session_store import SessionStore
from services.event_log_service import EventLogService, LogAction, LogRecord
from services.dialog_router import DialogRouter
from services.timer_service import TimerService, TimerConfig
from services.bot_service import BotService, bot_service

__all__ = [
    "SessionStore",
    "EventLogService",
    "LogAction",
    "LogRecord",
    "DialogRouter",
    "TimerService",
    "TimerConfig",
    "BotService",
    "bot_service"
]
