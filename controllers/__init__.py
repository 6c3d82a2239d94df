"""
Controllers package for Timer-Discord-Bot
"""

from controllers.message_controller import MessageController
from controllers.command_controller import CommandController
from controllers.interaction_controller import InteractionController

__all__ = ["MessageController", "CommandController", "InteractionController"]
