"""
Models package for Timer-Discord-Bot
"""

from models.timer import Timer, TimerState
from models.reply import Action, Reply

__all__ = ["Timer", "TimerState", "Action", "Reply"]
