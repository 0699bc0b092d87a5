"""Shared fixtures: a scripted in-memory ServerQuery transport and a bot wired to it."""

from collections import defaultdict
from typing import Any, Callable

import pytest

from woodhouse import Bot, BotOptions
from woodhouse.errors import QueryError
from woodhouse.query import QueryRequest, QueryResponse

BOT_UID = "abc"


class FakeTransport:
    """Replies per action from a script and records every request and subscription.

    An outcome is a QueryResponse, a callable(request) -> QueryResponse, or an
    (error_id, message) tuple that is raised as QueryError.
    """

    def __init__(self) -> None:
        self.outcomes: dict[str, Any] = {}
        self.queued: dict[str, list[Any]] = defaultdict(list)
        self.sent: list[QueryRequest] = []
        self.subscriptions: list[tuple[str, int | None]] = []
        self.notify_handler: Callable[..., Any] | None = None

    def reply(self, action: str, data: Any = None, status: str = "ok") -> None:
        self.outcomes[action] = QueryResponse(status=status, data=data)

    def reply_with(self, action: str, fn: Callable[[QueryRequest], QueryResponse]) -> None:
        self.outcomes[action] = fn

    def fail(self, action: str, error_id: int, message: str = "error") -> None:
        self.outcomes[action] = (error_id, message)

    def queue(self, action: str, outcome: Any) -> None:
        """One-shot outcome used before the standing one."""
        self.queued[action].append(outcome)

    @property
    def actions(self) -> list[str]:
        return [r.action for r in self.sent]

    def params_of(self, action: str) -> list[dict[str, Any]]:
        return [r.params for r in self.sent if r.action == action]

    async def send(self, request: QueryRequest) -> QueryResponse:
        self.sent.append(request)
        if self.queued[request.action]:
            outcome = self.queued[request.action].pop(0)
        else:
            outcome = self.outcomes.get(request.action, QueryResponse())
        if isinstance(outcome, tuple):
            error_id, message = outcome
            raise QueryError(message, error_id=error_id)
        if callable(outcome):
            return outcome(request)
        return outcome

    async def subscribe(self, event: str, id: int | None = None) -> None:
        self.subscriptions.append((event, id))

    def on_notify(self, handler: Callable[..., Any]) -> None:
        self.notify_handler = handler

    async def notify(self, event: str, data: dict[str, Any]) -> None:
        assert self.notify_handler is not None, "bot.init() wires the handler"
        await self.notify_handler(event, data)


CLIENTS: dict[int, dict[str, Any]] = {
    5: {"client_unique_identifier": BOT_UID, "client_nickname": "serveradmin"},
    7: {"client_unique_identifier": "uid-7", "client_nickname": "alice"},
    8: {"client_unique_identifier": "uid-8", "client_nickname": "bob"},
}
CHANNELS: dict[int, dict[str, Any]] = {
    3: {"channel_name": "Default Channel"},
    4: {"channel_name": "Lobby"},
}
DBIDS = {"uid-7": 70, "uid-8": 80}


def script_server(transport: FakeTransport) -> FakeTransport:
    """Happy path: bot is clid 5 (uid 'abc'), target channel is cid 3."""
    transport.reply("login")
    transport.reply("whoami", {"client_id": 5, "virtualserver_id": 1})
    transport.reply_with(
        "clientinfo",
        lambda req: QueryResponse(data=CLIENTS.get(int(req.params["clid"]))),
    )
    transport.reply_with(
        "clientdbfind",
        lambda req: QueryResponse(data={"cldbid": DBIDS[req.params["pattern"]]}),
    )
    transport.reply("use")
    transport.reply("serverinfo", {"virtualserver_id": 1, "virtualserver_name": "Test"})
    transport.reply("clientupdate")
    transport.reply("channelfind", [{"cid": 3, "channel_name": "Default Channel"}])
    transport.reply_with(
        "channelinfo",
        lambda req: QueryResponse(data=CHANNELS.get(int(req.params["cid"]))),
    )
    transport.reply("clientmove")
    transport.reply("sendtextmessage")
    return transport


@pytest.fixture
def transport() -> FakeTransport:
    return script_server(FakeTransport())


@pytest.fixture
def options() -> BotOptions:
    return BotOptions(sid="1", user="serveradmin", password="secret", name="Woodhouse")


@pytest.fixture
def bot(transport: FakeTransport, options: BotOptions) -> Bot:
    return Bot(transport, options=options)
