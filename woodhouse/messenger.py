"""Messenger: fire-and-forget chat messages via sendtextmessage."""

import logging
from typing import Any

from woodhouse.commands import Scope
from woodhouse.errors import QueryError
from woodhouse.gateway import QueryGateway

logger = logging.getLogger(__name__)


class Messenger:
    def __init__(self, gateway: QueryGateway) -> None:
        self._gateway = gateway

    async def send(self, target: Any, message: str, scope: int = Scope.SERVER) -> None:
        """Send message to target in scope. Protocol failures are logged, never raised.

        The gateway has already published the failure signal by then. For
        SERVER scope the target is the virtual server the session is using.
        """
        mode = Scope(scope)
        if mode is Scope.GLOBAL:
            raise ValueError("GLOBAL is a command scope, not a message target")
        try:
            await self._gateway.execute(
                "sendtextmessage",
                {"targetmode": int(mode), "target": target, "msg": message},
            )
        except QueryError as e:
            logger.debug("Message to %s (%s) not sent: %s", target, mode.name, e)
            return
        logger.debug(
            "Sent message to target: %s with context: %d => '%s'", target, mode, message
        )
