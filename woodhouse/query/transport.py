"""Load a QueryTransport implementation from a "module:ClassName" entrypoint."""

import importlib
import logging

from woodhouse.errors import TransportConfigError
from woodhouse.query.contract import QueryTransport

logger = logging.getLogger(__name__)


def load_transport(entrypoint: str | None, host: str, port: int) -> QueryTransport:
    """Import the transport class and construct it with (host, port)."""
    if not entrypoint or ":" not in entrypoint:
        raise TransportConfigError(
            f"transport.entrypoint must be 'module:ClassName', got {entrypoint!r}"
        )
    module_name, class_name = entrypoint.split(":", 1)
    try:
        mod = importlib.import_module(module_name)
    except ImportError as e:
        raise TransportConfigError(f"Cannot import transport module {module_name!r}: {e}") from e
    cls = getattr(mod, class_name, None)
    if cls is None:
        raise TransportConfigError(f"Class {class_name!r} not found in {module_name!r}")
    transport = cls(host, port)
    if not isinstance(transport, QueryTransport):
        raise TransportConfigError(
            f"{entrypoint} does not implement send/subscribe/on_notify"
        )
    logger.info("Using transport %s for %s:%s", entrypoint, host, port)
    return transport
