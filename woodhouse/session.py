"""SessionBootstrap: login -> identify -> use server -> rename -> join channel -> ready.

Each phase awaits the previous one; a failing phase moves the session to
FAILED and re-raises the original error, so no later request is ever sent.
"""

import logging

from woodhouse.errors import ALREADY_MEMBER_OF_CHANNEL, EntityNotFoundError, QueryError
from woodhouse.events import SignalBus, Signals
from woodhouse.events.topics import NOTIFY_CATEGORIES
from woodhouse.gateway import QueryGateway
from woodhouse.lookup import EntityLookup, as_id
from woodhouse.models import Channel
from woodhouse.options import BotOptions
from woodhouse.query.contract import QueryTransport
from woodhouse.state import BootstrapState, SessionState

logger = logging.getLogger(__name__)


class SessionBootstrap:
    """Drives the startup state machine and owns SessionState writes."""

    def __init__(
        self,
        options: BotOptions,
        transport: QueryTransport,
        gateway: QueryGateway,
        lookup: EntityLookup,
        bus: SignalBus,
        session: SessionState,
    ) -> None:
        self.options = options
        self._transport = transport
        self._gateway = gateway
        self._lookup = lookup
        self._bus = bus
        self._session = session

    @property
    def state(self) -> BootstrapState:
        return self._session.phase

    def _enter(self, phase: BootstrapState) -> None:
        logger.debug("Bootstrap: %s -> %s", self._session.phase.value, phase.value)
        self._session.phase = phase

    async def run(
        self,
        user: str | None = None,
        password: str | None = None,
        channel: str | None = None,
    ) -> SessionState:
        """Bring the session to READY. Raises the first phase error unchanged."""
        self.options = self.options.with_overrides(
            user=user, password=password, channel=channel
        )
        try:
            await self._login()
            await self._identify()
            await self._use_server()
            await self._rename()
            await self._join(self.options.channel)
        except Exception:
            self._enter(BootstrapState.FAILED)
            raise
        await self._enter_ready()
        return self._session

    async def _login(self) -> None:
        self._enter(BootstrapState.LOGGING_IN)
        logger.info("Attempting to login as user: %s", self.options.user)
        await self._gateway.execute(
            "login",
            {
                "client_login_name": self.options.user,
                "client_login_password": self.options.password,
            },
        )
        logger.info("Authenticated.")

    async def _identify(self) -> None:
        result = await self._gateway.execute("whoami")
        row = result.response.first() or {}
        clid = as_id(row.get("client_id", row.get("clid")))
        if clid is None:
            raise EntityNotFoundError("whoami returned no client id")
        client = await self._lookup.client_by_id(clid, with_dbid=False)
        if client is None:
            raise EntityNotFoundError(f"Unable to load bot client info for clid {clid}")
        self._session.self_client = client
        self._enter(BootstrapState.AUTHENTICATED)
        logger.debug("Loaded bot client info: %s", client)

    async def _use_server(self) -> None:
        self._enter(BootstrapState.SELECTING_SERVER)
        logger.info("Attempting to use virtual server: %s", self.options.sid)
        await self._gateway.execute("use", {"sid": self.options.sid})
        self._session.server = await self._lookup.server()
        self._enter(BootstrapState.USING_SERVER)
        logger.info("Using virtual server.")

    async def _rename(self) -> None:
        await self._gateway.execute(
            "clientupdate", {"client_nickname": self.options.name}
        )
        logger.debug("Set bot name to: %s", self.options.name)

    async def _join(self, pattern: str) -> Channel:
        self._enter(BootstrapState.JOINING_CHANNEL)
        logger.info("Attempting to find & join channel: %s", pattern)
        channel = await self._lookup.channel_by_name(pattern)
        if channel is None:
            raise EntityNotFoundError(f"Unable to find channel: '{pattern}'")
        me = self._session.self_client
        if me is None:
            raise RuntimeError("Cannot join a channel before the bot is identified")
        logger.info("Channel found.")
        await self._transport.subscribe("channel", id=channel.cid)

        try:
            await self._gateway.execute(
                "clientmove",
                {"clid": me.clid, "cid": channel.cid},
                expected_errors=(ALREADY_MEMBER_OF_CHANNEL,),
            )
        except QueryError as e:
            if e.error_id != ALREADY_MEMBER_OF_CHANNEL:
                raise
            await self._gateway.warn(f"Already member of channel: {pattern}")

        self._session.channel = channel
        logger.info("Channel joined.")
        await self._bus.emit(Signals.JOIN, channel)
        return channel

    async def _enter_ready(self) -> None:
        self._enter(BootstrapState.READY)
        logger.info("%s is ready!", self.options.name)
        for event in NOTIFY_CATEGORIES:
            logger.debug("Registering for '%s' notifications", event)
            await self._transport.subscribe(event)
        await self._bus.emit(Signals.READY, self._session)

    async def join_channel(self, pattern: str | None = None) -> Channel:
        """Move the ready bot to another channel through the same find/move path.

        The previous channel subscription stays active: the transport contract
        has no unsubscribe, so notifications from earlier channels keep arriving.
        """
        if not self._session.ready:
            raise RuntimeError("Session is not ready; call init() first")
        self.options = self.options.with_overrides(channel=pattern)
        try:
            channel = await self._join(self.options.channel)
        finally:
            # a failed move leaves the session usable in its previous channel
            self._enter(BootstrapState.READY)
        return channel
