"""
Timer Model
Tracks one session's timer through setup, countdown and stop
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class TimerState(str, Enum):
    """Lifecycle state of a session's timer"""
    NAMING = "naming"      # created, waiting for a name
    SIZING = "sizing"      # named, waiting for a duration
    ARMED = "armed"        # named and sized, waiting for confirmation
    RUNNING = "running"    # counting down
    STOPPED = "stopped"    # terminal, no longer in the store


@dataclass
class Timer:
    """A session's timer configuration and runtime state"""
    name: str = ""
    duration: timedelta = field(default_factory=timedelta)
    start_time: Optional[datetime] = None
    stop_time: Optional[datetime] = None
    state: TimerState = TimerState.NAMING
    expiry_task: Optional[asyncio.Task] = field(default=None, repr=False, compare=False)

    @property
    def minutes(self) -> int:
        """Requested duration in whole minutes"""
        return int(self.duration.total_seconds() // 60)

    def is_startable(self) -> bool:
        """Check if the timer may transition to running"""
        return (
            self.state is TimerState.ARMED
            and self.name != ""
            and self.duration > timedelta(0)
        )

    def is_running(self) -> bool:
        """Check if the timer is counting down"""
        return self.state is TimerState.RUNNING

    def cancel_expiry(self) -> bool:
        """Cancel the pending auto-expiry countdown, if any"""
        task = self.expiry_task
        self.expiry_task = None
        if task is None or task.done():
            return False
        if task is asyncio.current_task():
            return False
        task.cancel()
        return True
