"""NotificationEnricher: resolve client/channel ids in raw notifications, then republish.

Resolution is sequential (client, then channel) and finishes before any
subscriber sees the event. clientmoved additionally yields
cliententerchannel / clientleftchannel relative to the bot's tracked channel.
"""

import logging
from typing import Any

from woodhouse.errors import QueryError
from woodhouse.events import Notification, SignalBus, Signals
from woodhouse.events.topics import CLIENT_MOVED
from woodhouse.lookup import EntityLookup
from woodhouse.models import Channel, Client
from woodhouse.state import SessionState

logger = logging.getLogger(__name__)

# Alias fields in precedence order
CLIENT_ID_FIELDS = ("invokerid", "clid")
CHANNEL_ID_FIELDS = ("ctid", "cid")


def pick_id(data: dict[str, Any], fields: tuple[str, ...]) -> Any:
    """First present, non-empty value among fields."""
    for name in fields:
        value = data.get(name)
        if value not in (None, ""):
            return value
    return None


class NotificationEnricher:
    def __init__(
        self, lookup: EntityLookup, bus: SignalBus, session: SessionState
    ) -> None:
        self._lookup = lookup
        self._bus = bus
        self._session = session

    async def handle(self, event: str, data: dict[str, Any]) -> Notification:
        """Enrich one raw notification and publish it under its own category name."""
        logger.debug("Received notification for event: '%s' with response: %s", event, data)
        client = await self._resolve_client(pick_id(data, CLIENT_ID_FIELDS))
        channel = await self._resolve_channel(pick_id(data, CHANNEL_ID_FIELDS))
        notification = Notification(event=event, data=data, client=client, channel=channel)

        await self._bus.emit(event, notification)
        if event == CLIENT_MOVED:
            await self._derive_movement(notification)
        return notification

    async def _resolve_client(self, clid: Any) -> Client | None:
        try:
            return await self._lookup.client_by_id(clid)
        except QueryError as e:
            logger.debug("Client %s not resolved: %s", clid, e)
            return None

    async def _resolve_channel(self, cid: Any) -> Channel | None:
        try:
            return await self._lookup.channel_by_id(cid)
        except QueryError as e:
            logger.debug("Channel %s not resolved: %s", cid, e)
            return None

    async def _derive_movement(self, notification: Notification) -> None:
        tracked = self._session.channel
        own_identity = self._session.identity
        client, channel = notification.client, notification.channel
        if tracked is None or own_identity is None or client is None or channel is None:
            return
        if client.identity == own_identity:
            return
        if channel.cid == tracked.cid:
            await self._bus.emit(Signals.CLIENT_ENTER_CHANNEL, notification)
        else:
            await self._bus.emit(Signals.CLIENT_LEFT_CHANNEL, notification)
