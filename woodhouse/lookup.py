"""Resolve ids and name patterns into Server, ServerGroup, Client and Channel records."""

import logging
from typing import Any

from woodhouse.errors import EntityNotFoundError
from woodhouse.gateway import QueryGateway
from woodhouse.models import Channel, Client, Server, ServerGroup
from woodhouse.state import SessionState

logger = logging.getLogger(__name__)


def as_id(value: Any) -> int | None:
    """Numeric id from an int or digit string; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def _require_first(rows: list[dict[str, Any]], key: str, what: str) -> int:
    for row in rows:
        found = as_id(row.get(key))
        if found is not None:
            return found
    raise EntityNotFoundError(f"Unable to find {what}")


class EntityLookup:
    """Query-backed lookups. Each method is one or two gateway round trips."""

    def __init__(self, gateway: QueryGateway, session: SessionState) -> None:
        self._gateway = gateway
        self._session = session

    async def server(self) -> Server | None:
        result = await self._gateway.execute("serverinfo")
        data = result.response.first()
        return Server(data=data) if data else None

    async def server_group_by_name(self, name: str) -> ServerGroup:
        result = await self._gateway.execute("servergrouplist")
        for row in result.response.rows():
            if row.get("name") == name:
                return ServerGroup(sgid=as_id(row.get("sgid")) or 0, name=name, data=row)
        raise EntityNotFoundError(f"Unable to find server group: '{name}'")

    async def client_by_id(self, clid: Any, with_dbid: bool = True) -> Client | None:
        """Full client record; None when clid is absent or not numeric.

        The database id is looked up only for clients other than the bot.
        """
        client_id = as_id(clid)
        if client_id is None:
            logger.debug("Cannot get client without a client id.")
            return None
        result = await self._gateway.execute("clientinfo", {"clid": client_id})
        data = result.response.first()
        if not data:
            return None
        client = Client.from_data(client_id, data)
        if with_dbid and client.identity and client.identity != self._session.identity:
            found = await self._gateway.execute(
                "clientdbfind", {"pattern": client.identity, "-uid": ""}
            )
            row = found.response.first() or {}
            client.dbid = as_id(row.get("cldbid"))
        return client

    async def client_by_name(self, pattern: str) -> Client | None:
        result = await self._gateway.execute("clientfind", {"pattern": pattern})
        clid = _require_first(result.response.rows(), "clid", f"client: '{pattern}'")
        return await self.client_by_id(clid)

    async def channel_by_id(self, cid: Any) -> Channel | None:
        """Full channel record; None when cid is absent or not numeric."""
        channel_id = as_id(cid)
        if not channel_id:
            logger.debug("Cannot get channel without a channel id.")
            return None
        result = await self._gateway.execute("channelinfo", {"cid": channel_id})
        data = result.response.first()
        return Channel(cid=channel_id, data=data) if data else None

    async def channel_by_name(self, pattern: str) -> Channel | None:
        result = await self._gateway.execute("channelfind", {"pattern": pattern})
        cid = _require_first(result.response.rows(), "cid", f"channel: '{pattern}'")
        return await self.channel_by_id(cid)
