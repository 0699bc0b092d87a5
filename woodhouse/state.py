"""Session state owned by the bootstrap; read by lookups, enricher and messenger."""

from dataclasses import dataclass
from enum import Enum

from woodhouse.models import Channel, Client, Server


class BootstrapState(str, Enum):
    IDLE = "idle"
    LOGGING_IN = "logging_in"
    AUTHENTICATED = "authenticated"
    SELECTING_SERVER = "selecting_server"
    USING_SERVER = "using_server"
    JOINING_CHANNEL = "joining_channel"
    READY = "ready"
    FAILED = "failed"


@dataclass
class SessionState:
    """The bot's own client record, its virtual server and its current channel.

    Written only by SessionBootstrap. self_client is set before any channel work
    starts; channel changes only through SessionBootstrap.join_channel.
    """

    self_client: Client | None = None
    server: Server | None = None
    channel: Channel | None = None
    phase: BootstrapState = BootstrapState.IDLE

    @property
    def identity(self) -> str | None:
        return self.self_client.identity if self.self_client else None

    @property
    def ready(self) -> bool:
        return self.phase is BootstrapState.READY
