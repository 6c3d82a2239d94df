"""
Timer Service
Drives each session's timer from setup to stop, including auto-expiry
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

from models.reply import Action, Reply
from models.timer import Timer, TimerState
from services.dialog_router import DialogRouter
from services.event_log_service import EventLogService, LogAction, LogRecord
from services.session_store import SessionStore

logger = logging.getLogger("timer-discord-bot")

Notifier = Callable[[int, Reply], Awaitable[Any]]


@dataclass
class TimerConfig:
    """Configuration for timer behavior"""
    log_file: str = "timers.log"
    seconds_per_minute: float = 60  # Real seconds slept per requested minute
    max_duration_minutes: int = 7 * 24 * 60


class TimerService:
    """
    Per-session timer state machine.

    NAMING -> SIZING -> ARMED -> RUNNING -> STOPPED. Every transition returns
    the reply to show the session; the auto-expiry countdown delivers its reply
    through the notifier instead, since nobody is waiting on it.
    """

    MAIN_MENU = "Выберите действие:"
    ENTER_NAME = "Введите название таймера:"
    ENTER_DURATION = "Введите время в минутах:"
    INVALID_DURATION = "Введите корректное время в минутах."
    CONFIRM_PROMPT = "Запустить таймер \"{name}\" на {minutes} минут?"
    NOT_CONFIGURED = "Ошибка! Сначала настройте таймер."
    ALREADY_RUNNING = "Таймер \"{name}\" уже запущен."
    STARTED = "Таймер \"{name}\" запущен на {minutes} минут."
    NOTHING_TO_STOP = "Нет активного таймера."
    STOPPED = "Таймер \"{name}\" остановлен."
    EXPIRED_SUFFIX = " ⏳ Время истекло!"
    USAGE_HINT = "Используй кнопки для работы с таймерами."
    LOGS_EMPTY = "🔍 Логи пусты."
    LOGS_HEADER = "📜 Логи таймеров:\n\n"

    def __init__(self,
                 store: SessionStore,
                 event_log: EventLogService,
                 config: TimerConfig = None,
                 notify: Optional[Notifier] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the timer service.

        Args:
            store: Session store owning all timers
            event_log: Sink for start/stop records
            config: Timer configuration
            notify: Coroutine delivering replies produced by auto-expiry
            clock: Source of wall-clock "now"
        """
        self.store = store
        self.event_log = event_log
        self.config = config or TimerConfig()
        self.notify = notify
        self.clock = clock
        self.router = DialogRouter(
            store,
            handlers={
                TimerState.NAMING: self.set_name,
                TimerState.SIZING: self.set_duration,
            },
            fallback=self.reject_text,
        )

    def main_menu(self) -> Reply:
        """Get the main menu prompt"""
        return Reply(self.MAIN_MENU, [Action.START_TIMER, Action.SHOW_LOGS])

    async def logs_reply(self) -> Reply:
        """Get the event log contents as a reply"""
        content = await self.event_log.read()
        if not content:
            return Reply(self.LOGS_EMPTY)
        return Reply(self.LOGS_HEADER + content)

    async def begin_setup(self, session_id: int) -> Reply:
        """Start configuring a new timer for a session"""
        previous = await self.store.put(
            session_id, Timer(), replace=lambda t: not t.is_running()
        )
        if previous is not None and previous.is_running():
            return Reply(self.ALREADY_RUNNING.format(name=previous.name), [Action.STOP_TIMER])

        logger.info(f"Timer setup started for session {session_id}")
        return Reply(self.ENTER_NAME)

    async def handle_text(self, session_id: int, text: str) -> Reply:
        """Advance the setup dialog with free-text input"""
        return await self.router.route(session_id, text)

    async def reject_text(self, session_id: int, text: str) -> Reply:
        """Reply to text that no setup step is waiting for"""
        return Reply(self.USAGE_HINT)

    async def set_name(self, session_id: int, text: str) -> Reply:
        """NAMING -> SIZING: take the text verbatim as the timer name"""
        if text == "":
            return Reply(self.ENTER_NAME)

        def apply(timer: Optional[Timer]) -> bool:
            if timer is None or timer.state is not TimerState.NAMING:
                return False
            timer.name = text
            timer.state = TimerState.SIZING
            return True

        if not await self.store.update(session_id, apply):
            return await self.reject_text(session_id, text)

        logger.info(f"Timer named '{text}' for session {session_id}")
        return Reply(self.ENTER_DURATION)

    def parse_minutes(self, text: str) -> Optional[int]:
        """Parse a positive whole number of minutes, or None if invalid"""
        try:
            minutes = int(text.strip())
        except ValueError:
            return None
        if minutes <= 0 or minutes > self.config.max_duration_minutes:
            return None
        return minutes

    async def set_duration(self, session_id: int, text: str) -> Reply:
        """SIZING -> ARMED: parse the duration and ask for confirmation"""
        minutes = self.parse_minutes(text)

        def apply(timer: Optional[Timer]):
            if timer is None or timer.state is not TimerState.SIZING:
                return None
            if minutes is None:
                return False
            timer.duration = timedelta(minutes=minutes)
            timer.state = TimerState.ARMED
            return timer.name

        result = await self.store.update(session_id, apply)
        if result is None:
            return await self.reject_text(session_id, text)
        if result is False:
            logger.debug(f"Invalid duration '{text}' for session {session_id}")
            return Reply(self.INVALID_DURATION)

        logger.info(f"Timer '{result}' armed for {minutes} minutes in session {session_id}")
        return Reply(
            self.CONFIRM_PROMPT.format(name=result, minutes=minutes),
            [Action.CONFIRM_TIMER],
        )

    async def confirm(self, session_id: int) -> Reply:
        """ARMED -> RUNNING: start the countdown"""
        now = self.clock()

        def apply(timer: Optional[Timer]):
            if timer is None:
                return "missing", "", 0
            if timer.is_running():
                return "running", timer.name, timer.minutes
            if not timer.is_startable():
                return "unarmed", timer.name, timer.minutes
            timer.start_time = now
            timer.state = TimerState.RUNNING
            timer.expiry_task = asyncio.create_task(
                self._countdown(session_id, timer),
                name=f"timer-expiry-{session_id}",
            )
            return "started", timer.name, timer.minutes

        outcome, name, minutes = await self.store.update(session_id, apply)
        if outcome == "running":
            return Reply(self.ALREADY_RUNNING.format(name=name), [Action.STOP_TIMER])
        if outcome != "started":
            logger.debug(f"Confirm rejected for session {session_id}: {outcome}")
            return Reply(self.NOT_CONFIGURED)

        await self.event_log.append(LogRecord(LogAction.START, name, now))
        logger.info(f"Timer '{name}' started for {minutes} minutes in session {session_id}")
        return Reply(self.STARTED.format(name=name, minutes=minutes), [Action.STOP_TIMER])

    async def stop(self, session_id: int) -> Reply:
        """RUNNING -> STOPPED by user request"""
        timer = await self.store.remove(session_id, match=lambda t: t.is_running())
        if timer is None:
            return Reply(self.NOTHING_TO_STOP)

        timer.cancel_expiry()
        return await self._finish(session_id, timer, expired=False)

    async def expire(self, session_id: int, timer: Timer) -> Optional[Reply]:
        """
        RUNNING -> STOPPED when the countdown runs out.

        Only acts if the session still holds this very timer; a manual stop or
        a newer timer makes it a no-op.

        Returns:
            The expiry reply, or None if the timer was already gone
        """
        removed = await self.store.remove(session_id, match=lambda t: t is timer)
        if removed is None:
            logger.debug(f"Timer for session {session_id} already stopped before expiry")
            return None

        removed.expiry_task = None
        return await self._finish(session_id, removed, expired=True)

    async def _countdown(self, session_id: int, timer: Timer):
        """Sleep for the timer's duration, then expire it"""
        seconds = timer.duration.total_seconds() / 60 * self.config.seconds_per_minute
        await asyncio.sleep(seconds)

        reply = await self.expire(session_id, timer)
        if reply is None or self.notify is None:
            return

        try:
            await self.notify(session_id, reply)
        except Exception as e:
            logger.error(f"Error delivering expiry notice to session {session_id}: {e}")

    async def _finish(self, session_id: int, timer: Timer, expired: bool) -> Reply:
        """Mark a removed timer stopped, log it and build the reply"""
        timer.stop_time = self.clock()
        timer.state = TimerState.STOPPED

        action = LogAction.EXPIRE if expired else LogAction.STOP
        await self.event_log.append(
            LogRecord(action, timer.name, timer.start_time, timer.stop_time)
        )

        text = self.STOPPED.format(name=timer.name)
        if expired:
            text += self.EXPIRED_SUFFIX
        logger.info(f"Timer '{timer.name}' {'expired' if expired else 'stopped'} in session {session_id}")
        return Reply(text, expired=expired)

    async def shutdown(self):
        """Cancel every pending countdown"""
        count = await self.store.clear()
        logger.info(f"Timer service shutdown complete ({count} timers dropped)")
