"""Signal bus: process-local publish/subscribe for bot and notification events."""

from woodhouse.events.bus import SignalBus
from woodhouse.events.models import ActionRecord, Failure, Notification
from woodhouse.events.topics import Signals

__all__ = ["ActionRecord", "Failure", "Notification", "SignalBus", "Signals"]
