"""Tests for Bot: callback-style shims, signal helpers, construction from settings."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from conftest import FakeTransport
from woodhouse import Bot, BootstrapState, Signals
from woodhouse.errors import EntityNotFoundError, QueryError
from woodhouse.options import ENV_KEYS
from woodhouse.query import QueryRequest, QueryResponse
from woodhouse.settings import reload_settings


class TestQueryShim:
    @pytest.mark.asyncio
    async def test_args_in_any_order(self, bot: Bot, transport: FakeTransport) -> None:
        calls: list[tuple] = []
        await bot.query(lambda *a: calls.append(a), {"clid": 7}, "clientinfo")
        err, resp, req = calls[0]
        assert err is None
        assert resp.data["client_nickname"] == "alice"
        assert req == QueryRequest("clientinfo", {"clid": 7})

    @pytest.mark.asyncio
    async def test_async_callback_awaited(self, bot: Bot) -> None:
        calls: list[object] = []

        async def done(err, resp, req) -> None:
            calls.append(resp.data)

        await bot.query("whoami", done)
        assert calls == [{"client_id": 5, "virtualserver_id": 1}]

    @pytest.mark.asyncio
    async def test_error_goes_to_callback(self, bot: Bot, transport: FakeTransport) -> None:
        transport.fail("use", 1024, "invalid serverID")
        calls: list[tuple] = []
        result = await bot.query("use", {"sid": 9}, lambda *a: calls.append(a))
        assert result is None
        assert isinstance(calls[0][0], QueryError)
        assert calls[0][1:] == (None, None)

    @pytest.mark.asyncio
    async def test_transport_crash_goes_to_callback(
        self, bot: Bot, transport: FakeTransport
    ) -> None:
        def crash(request: QueryRequest) -> QueryResponse:
            raise RuntimeError("not connected")

        transport.reply_with("whoami", crash)
        calls: list[tuple] = []
        assert await bot.query("whoami", lambda *a: calls.append(a)) is None
        assert isinstance(calls[0][0], QueryError)
        assert "not connected" in str(calls[0][0])

    @pytest.mark.asyncio
    async def test_without_callback_still_runs(self, bot: Bot, transport: FakeTransport) -> None:
        result = await bot.query("whoami")
        assert result is not None
        assert transport.actions == ["whoami"]

    @pytest.mark.asyncio
    async def test_missing_action(self, bot: Bot, transport: FakeTransport) -> None:
        calls: list[tuple] = []
        await bot.query({"clid": 1}, lambda *a: calls.append(a))
        assert isinstance(calls[0][0], ValueError)
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_unknown_argument_emits_warning(self, bot: Bot) -> None:
        warnings: list[str] = []
        bot.on(Signals.WARNING, warnings.append)
        await bot.query("whoami", b"junk")
        assert any("Unknown argument type" in w for w in warnings)


class TestLookupShims:
    @pytest.mark.asyncio
    async def test_client_by_number_or_name(self, bot: Bot, transport: FakeTransport) -> None:
        transport.reply("clientfind", [{"clid": 8}])
        by_id: list[tuple] = []
        by_name: list[tuple] = []
        await bot.lookup_client(7, lambda *a: by_id.append(a))
        await bot.lookup_client(lambda *a: by_name.append(a), "bob")
        assert by_id[0][1].clid == 7
        assert by_name[0][1].clid == 8
        assert transport.params_of("clientfind") == [{"pattern": "bob"}]

    @pytest.mark.asyncio
    async def test_channel_lookup(self, bot: Bot) -> None:
        found = await bot.lookup_channel(4)
        assert found is not None and found.name == "Lobby"

    @pytest.mark.asyncio
    async def test_lookup_error_to_callback(self, bot: Bot, transport: FakeTransport) -> None:
        transport.reply("channelfind", [])
        calls: list[tuple] = []
        assert await bot.lookup_channel("nowhere", lambda *a: calls.append(a)) is None
        assert isinstance(calls[0][0], EntityNotFoundError)

    @pytest.mark.asyncio
    async def test_nothing_to_look_up(self, bot: Bot, transport: FakeTransport) -> None:
        calls: list[tuple] = []
        await bot.lookup_client(lambda *a: calls.append(a))
        assert calls == [(None, None)]
        assert transport.sent == []


class TestSignals:
    @pytest.mark.asyncio
    async def test_action_signal_for_every_round_trip(self, bot: Bot, transport: FakeTransport) -> None:
        actions: list[str] = []
        bot.on(Signals.ACTION, lambda record: actions.append(record.action))
        await bot.init()
        assert actions == transport.actions

    @pytest.mark.asyncio
    async def test_once_ready(self, bot: Bot) -> None:
        ready = MagicMock()
        bot.once(Signals.READY, ready)
        await bot.init()
        ready.assert_called_once_with(bot.session)
        assert bot.state is BootstrapState.READY


class TestFromSettings:
    def test_builds_transport_from_entrypoint(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for key in ENV_KEYS.values():
            monkeypatch.delenv(key, raising=False)
        (tmp_path / "settings.yaml").write_text(
            yaml.safe_dump(
                {
                    "bot": {"host": "ts.example.org", "port": 10022, "password": "pw"},
                    "query": {"timeout": 5},
                    "transport": {"entrypoint": "somewhere:Transport"},
                }
            )
        )
        fake = FakeTransport()
        reload_settings()
        try:
            with (
                patch("woodhouse.bot.load_transport", return_value=fake) as load_transport,
                patch("woodhouse.bot.setup_logging") as setup_logging,
            ):
                bot = Bot.from_settings(
                    config_dir=tmp_path, explicit={"name": "Jeeves"}, project_root=tmp_path
                )
        finally:
            reload_settings()

        load_transport.assert_called_once_with("somewhere:Transport", "ts.example.org", 10022)
        setup_logging.assert_called_once()
        assert bot.options.name == "Jeeves"
        assert bot.options.password == "pw"
        assert bot.gateway._timeout == 5.0
