"""Tests for EntityLookup: id guards, dbid resolution, name patterns."""

import pytest

from conftest import BOT_UID, FakeTransport, script_server
from woodhouse.errors import EntityNotFoundError
from woodhouse.events import SignalBus
from woodhouse.gateway import QueryGateway
from woodhouse.lookup import EntityLookup, as_id
from woodhouse.models import Client
from woodhouse.state import SessionState


def _lookup(session: SessionState | None = None) -> tuple[EntityLookup, FakeTransport]:
    transport = script_server(FakeTransport())
    gateway = QueryGateway(transport, SignalBus())
    return EntityLookup(gateway, session or SessionState()), transport


def test_as_id() -> None:
    assert as_id(7) == 7
    assert as_id("7") == 7
    assert as_id(" 12 ") == 12
    assert as_id("abc") is None
    assert as_id(None) is None
    assert as_id(True) is None
    assert as_id(1.5) is None


class TestClientById:
    @pytest.mark.asyncio
    async def test_absent_or_non_numeric_id_sends_nothing(self) -> None:
        lookup, transport = _lookup()
        assert await lookup.client_by_id(None) is None
        assert await lookup.client_by_id("nobody") is None
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_other_client_gets_dbid(self) -> None:
        session = SessionState(self_client=Client(clid=5, unique_identifier=BOT_UID))
        lookup, transport = _lookup(session)
        client = await lookup.client_by_id("7")
        assert client is not None
        assert client.clid == 7
        assert client.identity == "uid-7"
        assert client.nickname == "alice"
        assert client.dbid == 70
        assert transport.params_of("clientdbfind") == [{"pattern": "uid-7", "-uid": ""}]

    @pytest.mark.asyncio
    async def test_bot_itself_skips_dbid(self) -> None:
        session = SessionState(self_client=Client(clid=5, unique_identifier=BOT_UID))
        lookup, transport = _lookup(session)
        client = await lookup.client_by_id(5)
        assert client is not None and client.dbid is None
        assert "clientdbfind" not in transport.actions

    @pytest.mark.asyncio
    async def test_with_dbid_false(self) -> None:
        lookup, transport = _lookup()
        client = await lookup.client_by_id(7, with_dbid=False)
        assert client is not None and client.dbid is None
        assert transport.actions == ["clientinfo"]


class TestByName:
    @pytest.mark.asyncio
    async def test_channel_by_name_uses_first_match(self) -> None:
        lookup, transport = _lookup()
        transport.reply("channelfind", [{"cid": 4}, {"cid": 3}])
        channel = await lookup.channel_by_name("L")
        assert channel is not None
        assert channel.cid == 4
        assert channel.name == "Lobby"

    @pytest.mark.asyncio
    async def test_client_by_name(self) -> None:
        lookup, transport = _lookup()
        transport.reply("clientfind", {"clid": 8, "client_nickname": "bob"})
        client = await lookup.client_by_name("bob")
        assert client is not None and client.clid == 8
        assert client.dbid == 80

    @pytest.mark.asyncio
    async def test_no_match_raises(self) -> None:
        lookup, transport = _lookup()
        transport.reply("channelfind", [])
        with pytest.raises(EntityNotFoundError):
            await lookup.channel_by_name("nowhere")

    @pytest.mark.asyncio
    async def test_channel_by_id_zero_is_absent(self) -> None:
        lookup, transport = _lookup()
        assert await lookup.channel_by_id(0) is None
        assert transport.sent == []


class TestServer:
    @pytest.mark.asyncio
    async def test_server(self) -> None:
        lookup, _ = _lookup()
        server = await lookup.server()
        assert server is not None
        assert server.sid == 1
        assert server.name == "Test"

    @pytest.mark.asyncio
    async def test_server_group_by_name(self) -> None:
        lookup, transport = _lookup()
        transport.reply(
            "servergrouplist",
            [{"sgid": 6, "name": "Server Admin"}, {"sgid": 8, "name": "Guest"}],
        )
        group = await lookup.server_group_by_name("Guest")
        assert group.sgid == 8

    @pytest.mark.asyncio
    async def test_server_group_missing(self) -> None:
        lookup, transport = _lookup()
        transport.reply("servergrouplist", [{"sgid": 6, "name": "Server Admin"}])
        with pytest.raises(EntityNotFoundError, match="Unable to find server group"):
            await lookup.server_group_by_name("Guest")
