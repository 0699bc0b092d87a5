"""ServerQuery transport contract and transport loading."""

from woodhouse.query.contract import (
    NotifyHandler,
    QueryRequest,
    QueryResponse,
    QueryResult,
    QueryTransport,
)
from woodhouse.query.transport import load_transport

__all__ = [
    "NotifyHandler",
    "QueryRequest",
    "QueryResponse",
    "QueryResult",
    "QueryTransport",
    "load_transport",
]
