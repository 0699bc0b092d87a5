"""Transport contract: what the bot needs from a ServerQuery client.

The wire format lives entirely in the transport implementation. Woodhouse
only sends QueryRequest objects, reads QueryResponse objects and receives
notifications as (category, fields) pairs.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

NotifyHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True)
class QueryRequest:
    action: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QueryResponse:
    """Decoded server reply. data is one row (dict) or many (list of dicts)."""

    status: str = "ok"
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def rows(self) -> list[dict[str, Any]]:
        if self.data is None:
            return []
        if isinstance(self.data, list):
            return list(self.data)
        return [self.data]

    def first(self) -> dict[str, Any] | None:
        rows = self.rows()
        return rows[0] if rows else None


@dataclass(frozen=True)
class QueryResult:
    """One completed round trip."""

    request: QueryRequest
    response: QueryResponse

    @property
    def data(self) -> Any:
        return self.response.data


@runtime_checkable
class QueryTransport(Protocol):
    """ServerQuery client. Implementations own the connection and the wire codec."""

    async def send(self, request: QueryRequest) -> QueryResponse:
        """Send one command and return the decoded reply.
        Raises QueryError when the server answers with a non-zero error id."""

    async def subscribe(self, event: str, id: int | None = None) -> None:
        """servernotifyregister for a notification category (optionally scoped by id)."""

    def on_notify(self, handler: NotifyHandler) -> None:
        """Register the coroutine receiving (category, fields) for every notification."""
