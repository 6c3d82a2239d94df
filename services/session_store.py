"""
Session Store
Holds at most one timer per session behind a single lock
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from models.timer import Timer, TimerState

logger = logging.getLogger("timer-discord-bot")


class SessionStore:
    """
    Process-wide mapping from session ID to that session's timer.

    Every read and write goes through the store's own lock, so no caller can
    observe a timer while another coroutine is half-way through changing it.
    The backing dict is never handed out.
    """

    def __init__(self):
        self._timers: Dict[int, Timer] = {}
        self._lock = asyncio.Lock()

        # Statistics
        self._total_created = 0
        self._refresh_stats()

    async def get(self, session_id: int) -> Optional[Timer]:
        """Get the timer for a session"""
        async with self._lock:
            return self._timers.get(session_id)

    async def put(self, session_id: int, timer: Timer,
                  replace: Optional[Callable[[Timer], bool]] = None) -> Optional[Timer]:
        """
        Store a timer for a session, replacing any existing one.

        Args:
            session_id: Session to store the timer for
            timer: Timer to store
            replace: Optional predicate; an existing timer is only replaced
                when it holds, otherwise nothing is stored

        Returns:
            The timer that was already stored, if any
        """
        async with self._lock:
            previous = self._timers.get(session_id)
            if previous is not None and replace is not None and not replace(previous):
                return previous
            self._timers[session_id] = timer
            self._total_created += 1
            self._refresh_stats()
        if previous is not None:
            logger.debug(f"Replaced timer for session {session_id}")
        return previous

    async def remove(self, session_id: int,
                     match: Optional[Callable[[Timer], bool]] = None) -> Optional[Timer]:
        """
        Remove and return a session's timer.

        Args:
            session_id: Session to remove the timer from
            match: Optional predicate; the timer is only removed when it holds

        Returns:
            The removed timer, or None if nothing (matching) was stored
        """
        async with self._lock:
            timer = self._timers.get(session_id)
            if timer is None:
                return None
            if match is not None and not match(timer):
                return None
            del self._timers[session_id]
            self._refresh_stats()
            return timer

    async def update(self, session_id: int,
                     mutator: Callable[[Optional[Timer]], Any]) -> Any:
        """
        Run a synchronous mutator against a session's timer under the lock.

        The mutator receives the stored timer (or None) and its return value is
        passed back to the caller. It must not await.
        """
        async with self._lock:
            try:
                return mutator(self._timers.get(session_id))
            finally:
                self._refresh_stats()

    async def clear(self) -> int:
        """Drop every timer, cancelling pending countdowns"""
        async with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            self._refresh_stats()
        for timer in timers:
            timer.cancel_expiry()
        if timers:
            logger.info(f"Cleared {len(timers)} timers")
        return len(timers)

    def _refresh_stats(self):
        """Recount the stored timers; callers must hold the lock"""
        running = sum(1 for t in self._timers.values() if t.state is TimerState.RUNNING)
        self._stats = {
            "total_created": self._total_created,
            "stored": len(self._timers),
            "running": running,
            "configuring": len(self._timers) - running,
        }

    @property
    def stats(self) -> dict:
        """
        Get store statistics.

        Returns the snapshot taken at the end of the last locked operation, so
        it can be read from the health server's thread without the lock.
        """
        return dict(self._stats)
