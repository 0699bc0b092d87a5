"""Woodhouse error hierarchy.

    WoodhouseError
    ├── QueryError
    │   └── QueryTimeoutError
    ├── EntityNotFoundError
    ├── CommandConflictError
    └── TransportConfigError
"""

from typing import Any

# ServerQuery error id for "already member of channel" on clientmove.
ALREADY_MEMBER_OF_CHANNEL = 770


class WoodhouseError(Exception):
    """Base class for all Woodhouse exceptions."""


class QueryError(WoodhouseError):
    """The server rejected a query or the transport could not complete it.

    error_id and message are the protocol's own error fields; action and
    params identify the request that failed.
    """

    def __init__(
        self,
        message: str,
        error_id: int | None = None,
        action: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_id = error_id
        self.action = action
        self.params = params

    def __str__(self) -> str:
        if self.error_id is None:
            return self.message
        return f"{self.message} (error id {self.error_id})"


class QueryTimeoutError(QueryError):
    """No response arrived within the per-call timeout."""


class EntityNotFoundError(WoodhouseError):
    """A lookup matched no server group, client or channel."""


class CommandConflictError(WoodhouseError):
    """A command trigger was registered twice."""

    def __init__(self, trigger: str) -> None:
        super().__init__(f"Command: '{trigger}' is already registered!")
        self.trigger = trigger


class TransportConfigError(WoodhouseError):
    """The configured transport entrypoint could not be loaded."""
