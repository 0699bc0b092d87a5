"""Entity records resolved from ServerQuery responses."""

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class Client:
    """A connected client. dbid is only resolved for clients other than the bot."""

    clid: int
    unique_identifier: str | None = None
    dbid: int | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def identity(self) -> str | None:
        return self.unique_identifier

    @property
    def nickname(self) -> str | None:
        return self.data.get("client_nickname")

    @classmethod
    def from_data(cls, clid: int, data: dict[str, Any]) -> "Client":
        return cls(
            clid=clid,
            unique_identifier=data.get("client_unique_identifier"),
            data=dict(data),
        )


@dataclass
class Channel:
    cid: int
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        return self.data.get("channel_name")


@dataclass
class Server:
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def sid(self) -> Any:
        return self.data.get("virtualserver_id")

    @property
    def name(self) -> str | None:
        return self.data.get("virtualserver_name")


@dataclass
class ServerGroup:
    sgid: int
    name: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Command:
    """Chat command: trigger text, handler and delivery scope (see commands.Scope)."""

    trigger: str
    handler: Callable[..., Any]
    scope: int
