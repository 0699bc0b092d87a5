"""Payloads carried by SignalBus signals."""

from dataclasses import dataclass, field
from typing import Any

from woodhouse.models import Channel, Client
from woodhouse.query.contract import QueryRequest, QueryResponse

__all__ = ["ActionRecord", "Failure", "Notification"]


@dataclass(frozen=True)
class ActionRecord:
    """Audit record of one query round trip. response is None when it failed."""

    action: str
    request: QueryRequest
    response: QueryResponse | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class Failure:
    message: str
    error: BaseException | None = None


@dataclass(frozen=True)
class Notification:
    """Server notification with its client and channel ids resolved to records."""

    event: str
    data: dict[str, Any] = field(default_factory=dict)
    client: Client | None = None
    channel: Channel | None = None
