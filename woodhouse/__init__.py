"""Woodhouse: ServerQuery session bot with enriched notifications."""

from woodhouse.bot import Bot
from woodhouse.commands import CommandRegistry, Scope
from woodhouse.events import ActionRecord, Failure, Notification, SignalBus, Signals
from woodhouse.options import BotOptions, load_options
from woodhouse.state import BootstrapState, SessionState

__all__ = [
    "ActionRecord",
    "BootstrapState",
    "Bot",
    "BotOptions",
    "CommandRegistry",
    "Failure",
    "Notification",
    "Scope",
    "SessionState",
    "SignalBus",
    "Signals",
    "load_options",
]
