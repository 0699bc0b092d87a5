"""Command registry: trigger text -> handler plus delivery scope.

Dispatch is left to consumers of the enriched text notifications
(textprivate / textchannel / textserver); the registry only stores.
"""

import logging
from enum import IntEnum
from typing import Any, Callable, Iterator

from woodhouse.errors import CommandConflictError
from woodhouse.events import Failure, SignalBus, Signals
from woodhouse.models import Command

logger = logging.getLogger(__name__)


class Scope(IntEnum):
    """Delivery context. Numeric values match ServerQuery targetmode (except GLOBAL)."""

    GLOBAL = 0
    PRIVATE = 1
    CHANNEL = 2
    SERVER = 3


class CommandRegistry:
    def __init__(self, bus: SignalBus) -> None:
        self._bus = bus
        self._commands: dict[str, Command] = {}

    def register(
        self,
        trigger: str,
        handler: Callable[..., Any],
        scope: int = Scope.PRIVATE,
    ) -> Command | None:
        """Store a command. A duplicate trigger keeps the original and reports a failure."""
        if trigger in self._commands:
            err = CommandConflictError(trigger)
            logger.error("%s", err)
            self._bus.emit_nowait(Signals.FAILURE, Failure(message=str(err), error=err))
            return None
        command = Command(trigger=trigger, handler=handler, scope=Scope(scope))
        self._commands[trigger] = command
        logger.debug("Registered command '%s' (%s)", trigger, command.scope.name)
        return command

    def get(self, trigger: str) -> Command | None:
        return self._commands.get(trigger)

    def __contains__(self, trigger: object) -> bool:
        return trigger in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))
