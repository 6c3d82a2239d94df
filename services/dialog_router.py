"""
Dialog Router
Sends free-text input to the setup step the session's timer is waiting for
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

from models.reply import Reply
from models.timer import TimerState
from services.session_store import SessionStore

logger = logging.getLogger("timer-discord-bot")

TextHandler = Callable[[int, str], Awaitable[Reply]]


class DialogRouter:
    """Routes text input by the explicit state of the session's timer"""

    def __init__(self,
                 store: SessionStore,
                 handlers: Dict[TimerState, TextHandler],
                 fallback: TextHandler):
        """
        Initialize the router.

        Args:
            store: Session store holding the timers
            handlers: Text handler for each state that accepts free text
            fallback: Handler for text no state accepts
        """
        self.store = store
        self._handlers = dict(handlers)
        self._fallback = fallback

    async def current_state(self, session_id: int) -> Optional[TimerState]:
        """Get the state of a session's timer, or None if it has none"""
        timer = await self.store.get(session_id)
        return timer.state if timer else None

    async def route(self, session_id: int, text: str) -> Reply:
        """Dispatch text to the handler for the session's current state"""
        state = await self.current_state(session_id)
        handler = self._handlers.get(state)
        if handler is None:
            logger.debug(f"Out-of-protocol text for session {session_id} in state {state}")
            return await self._fallback(session_id, text)
        return await handler(session_id, text)
