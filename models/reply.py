"""
Reply Model
Outbound messages produced by the timer core for the presentation layer
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Action(str, Enum):
    """Button choices offered to a session, keyed by their custom ID"""
    START_TIMER = "start_timer"
    SHOW_LOGS = "show_logs"
    CONFIRM_TIMER = "confirm_timer"
    STOP_TIMER = "stop_timer"

    @property
    def label(self) -> str:
        return ACTION_LABELS[self]


ACTION_LABELS = {
    Action.START_TIMER: "Старт таймера",
    Action.SHOW_LOGS: "Показать логи",
    Action.CONFIRM_TIMER: "Запустить",
    Action.STOP_TIMER: "Остановить таймер",
}


@dataclass
class Reply:
    """
    A message for one session.

    A reply carrying actions is a prompt (rendered with buttons); one without
    actions is a plain notice.
    """
    text: str
    actions: List[Action] = field(default_factory=list)
    expired: bool = False

    @property
    def is_prompt(self) -> bool:
        return bool(self.actions)
