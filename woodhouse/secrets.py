"""ServerQuery admin credentials kept in the OS keyring."""

import logging

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)

SERVICE_NAME = "woodhouse"
PASSWORD_KEY = "TS3_PASS"


def keyring_password(user: str | None = None) -> str | None:
    """Stored ServerQuery password, per login name first, then the shared entry.

    Returns None when the keyring has nothing or the backend is unusable.
    """
    names = [f"{PASSWORD_KEY}:{user}", PASSWORD_KEY] if user else [PASSWORD_KEY]
    for name in names:
        try:
            value = keyring.get_password(SERVICE_NAME, name)
        except KeyringError:
            logger.debug("keyring lookup failed for %s", name)
            return None
        if value:
            return value
    return None


def store_password(value: str, user: str | None = None) -> None:
    """Save the ServerQuery password. Raises KeyringError if backend unavailable."""
    name = f"{PASSWORD_KEY}:{user}" if user else PASSWORD_KEY
    keyring.set_password(SERVICE_NAME, name, value)


def forget_password(user: str | None = None) -> None:
    """Remove a stored password. No-op if absent."""
    name = f"{PASSWORD_KEY}:{user}" if user else PASSWORD_KEY
    try:
        keyring.delete_password(SERVICE_NAME, name)
    except KeyringError:
        pass
