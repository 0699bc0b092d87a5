"""Bot: wires gateway, bootstrap, enricher, commands and messenger around one transport.

Two calling conventions:
- awaitable methods with explicit parameters (init, join, message_*, lookup.*);
- callback-style shims (query, lookup_client, lookup_channel) taking loose
  arguments in any order, routed by shape through resolve_args.
"""

import asyncio
import inspect
import logging
from pathlib import Path
from typing import Any, Callable

from woodhouse.args import ResolvedArgs, Shape, resolve_args
from woodhouse.commands import CommandRegistry, Scope
from woodhouse.enricher import NotificationEnricher
from woodhouse.errors import EntityNotFoundError, QueryError
from woodhouse.events import SignalBus
from woodhouse.events.topics import Signals
from woodhouse.gateway import QueryGateway
from woodhouse.logging_config import setup_logging
from woodhouse.lookup import EntityLookup
from woodhouse.messenger import Messenger
from woodhouse.models import Channel, Client, Command, Server
from woodhouse.options import BotOptions, load_options
from woodhouse.query import QueryResult, QueryTransport, load_transport
from woodhouse.session import SessionBootstrap
from woodhouse.settings import get_default_settings, get_setting, load_settings
from woodhouse.state import BootstrapState, SessionState

logger = logging.getLogger(__name__)

_CLIENT_ARGS = {Shape.NUMBER: "clid", Shape.TEXT: "pattern"}
_CHANNEL_ARGS = {Shape.NUMBER: "cid", Shape.TEXT: "pattern"}


async def _invoke(callback: Callable[..., Any], *args: Any) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class Bot:
    """One ServerQuery session: identity, server, channel, commands and signals."""

    def __init__(
        self,
        transport: QueryTransport,
        options: BotOptions | None = None,
        settings: dict[str, Any] | None = None,
    ) -> None:
        self._settings = settings if settings is not None else get_default_settings()
        self._transport = transport
        self.bus = SignalBus()
        self.session = SessionState()
        self.gateway = QueryGateway(
            transport,
            self.bus,
            timeout=float(get_setting(self._settings, "query.timeout", 30.0)),
        )
        self.lookup = EntityLookup(self.gateway, self.session)
        self.bootstrap = SessionBootstrap(
            options=options or load_options(settings=self._settings),
            transport=transport,
            gateway=self.gateway,
            lookup=self.lookup,
            bus=self.bus,
            session=self.session,
        )
        self.enricher = NotificationEnricher(self.lookup, self.bus, self.session)
        self.commands = CommandRegistry(self.bus)
        self.messenger = Messenger(self.gateway)
        self._notify_wired = False
        self._tasks: set[asyncio.Task[Any]] = set()

    @classmethod
    def from_settings(
        cls,
        config_dir: Path | None = None,
        explicit: dict[str, Any] | None = None,
        env_file: Path | None = None,
        project_root: Path | None = None,
    ) -> "Bot":
        """Build options, logging and transport from config/settings.yaml and the environment."""
        settings = load_settings(config_dir)
        options = load_options(explicit, settings, env_file=env_file)
        setup_logging(project_root or Path.cwd(), settings, verbose=options.verbose)
        transport = load_transport(
            get_setting(settings, "transport.entrypoint"), options.host, options.port
        )
        return cls(transport, options=options, settings=settings)

    # ------------------------------------------------------------------ #
    # Session                                                              #
    # ------------------------------------------------------------------ #

    @property
    def options(self) -> BotOptions:
        return self.bootstrap.options

    @property
    def state(self) -> BootstrapState:
        return self.session.phase

    @property
    def self_client(self) -> Client | None:
        return self.session.self_client

    @property
    def server(self) -> Server | None:
        return self.session.server

    @property
    def channel(self) -> Channel | None:
        return self.session.channel

    async def init(self, *args: Any) -> SessionState:
        """Log in, select the server, rename, join the channel and go ready.

        Accepts an optional params mapping (user, pass, channel) and an optional
        callback(err) in any order. Errors are passed to the callback and re-raised.
        """
        resolved = resolve_args(args, on_warning=self._warn_nowait)
        params = resolved.params or {}
        if not self._notify_wired:
            self._transport.on_notify(self.enricher.handle)
            self._notify_wired = True
        try:
            session = await self.bootstrap.run(
                user=params.get("user"),
                password=params.get("pass") or params.get("password"),
                channel=params.get("channel"),
            )
        except Exception as e:
            await _invoke(resolved.callback, e)
            raise
        await _invoke(resolved.callback, None)
        return session

    async def join(self, channel: str | None = None) -> Channel:
        """Move the ready bot to channel (name pattern), or rejoin the configured one."""
        return await self.bootstrap.join_channel(channel)

    # ------------------------------------------------------------------ #
    # Signals                                                              #
    # ------------------------------------------------------------------ #

    def on(self, signal: str, handler: Callable[[Any], Any]) -> None:
        self.bus.on(signal, handler)

    def off(self, signal: str, handler: Callable[[Any], Any]) -> None:
        self.bus.off(signal, handler)

    def once(self, signal: str, handler: Callable[[Any], Any]) -> None:
        self.bus.once(signal, handler)

    def _warn_nowait(self, message: str) -> None:
        logger.warning("%s", message)
        self.bus.emit_nowait(Signals.WARNING, message)

    # ------------------------------------------------------------------ #
    # Callback-style shims                                                 #
    # ------------------------------------------------------------------ #

    def _spawn(self, coro: Any) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def query(self, *args: Any) -> asyncio.Task[QueryResult | None]:
        """Run a query from loose args: action name, params mapping, callback(err, resp, req)."""
        resolved = resolve_args(args, on_warning=self._warn_nowait)
        return self._spawn(self._query_with_callback(resolved))

    async def _query_with_callback(self, resolved: ResolvedArgs) -> QueryResult | None:
        if not resolved.action:
            await _invoke(resolved.callback, ValueError("No query action given"), None, None)
            return None
        try:
            result = await self.gateway.execute(resolved.action, resolved.params)
        except QueryError as e:
            await _invoke(resolved.callback, e, None, None)
            return None
        await _invoke(resolved.callback, None, result.response, result.request)
        return result

    def lookup_client(self, *args: Any) -> asyncio.Task[Client | None]:
        """Resolve a client by numeric id or by name pattern; callback(err, client)."""
        resolved = resolve_args(args, _CLIENT_ARGS, on_warning=self._warn_nowait)
        if resolved.clid is not None:
            coro = self.lookup.client_by_id(resolved.clid)
        elif resolved.pattern:
            coro = self.lookup.client_by_name(resolved.pattern)
        else:
            coro = None
        return self._spawn(self._lookup_with_callback(coro, resolved.callback))

    def lookup_channel(self, *args: Any) -> asyncio.Task[Channel | None]:
        """Resolve a channel by numeric id or by name pattern; callback(err, channel)."""
        resolved = resolve_args(args, _CHANNEL_ARGS, on_warning=self._warn_nowait)
        if resolved.cid is not None:
            coro = self.lookup.channel_by_id(resolved.cid)
        elif resolved.pattern:
            coro = self.lookup.channel_by_name(resolved.pattern)
        else:
            coro = None
        return self._spawn(self._lookup_with_callback(coro, resolved.callback))

    @staticmethod
    async def _lookup_with_callback(coro: Any, callback: Callable[..., Any]) -> Any:
        if coro is None:
            await _invoke(callback, None, None)
            return None
        try:
            found = await coro
        except (QueryError, EntityNotFoundError) as e:
            await _invoke(callback, e, None)
            return None
        await _invoke(callback, None, found)
        return found

    # ------------------------------------------------------------------ #
    # Commands                                                             #
    # ------------------------------------------------------------------ #

    def command(
        self, trigger: str, handler: Callable[..., Any], scope: int = Scope.PRIVATE
    ) -> Command | None:
        return self.commands.register(trigger, handler, scope)

    def global_command(self, trigger: str, handler: Callable[..., Any]) -> Command | None:
        return self.command(trigger, handler, Scope.GLOBAL)

    def private_command(self, trigger: str, handler: Callable[..., Any]) -> Command | None:
        return self.command(trigger, handler, Scope.PRIVATE)

    def channel_command(self, trigger: str, handler: Callable[..., Any]) -> Command | None:
        return self.command(trigger, handler, Scope.CHANNEL)

    def server_command(self, trigger: str, handler: Callable[..., Any]) -> Command | None:
        return self.command(trigger, handler, Scope.SERVER)

    # ------------------------------------------------------------------ #
    # Messages                                                             #
    # ------------------------------------------------------------------ #

    async def message(self, target: Any, msg: str, scope: int = Scope.SERVER) -> None:
        await self.messenger.send(target, msg, scope)

    async def message_client(self, clid: int, msg: str) -> None:
        await self.messenger.send(clid, msg, Scope.PRIVATE)

    async def message_channel(self, cid: int, msg: str) -> None:
        await self.messenger.send(cid, msg, Scope.CHANNEL)

    async def message_server(self, msg: str) -> None:
        await self.messenger.send(self.options.sid, msg, Scope.SERVER)
