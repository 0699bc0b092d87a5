"""Bot options: pydantic model resolved from environment, explicit values and settings."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator

from woodhouse.secrets import keyring_password

# option name -> environment key
ENV_KEYS: dict[str, str] = {
    "sid": "TS3_SID",
    "user": "TS3_USER",
    "password": "TS3_PASS",
    "name": "BOT_NAME",
    "channel": "TS3_CHANNEL",
    "host": "TS3_HOST",
    "port": "TS3_PORT",
    "verbose": "BOT_VERBOSE",
}


class BotOptions(BaseModel):
    """Connection and identity settings. Frozen; overrides produce a copy."""

    model_config = ConfigDict(frozen=True)

    sid: str = "1"
    user: str = "serveradmin"
    password: str = Field(default="password", repr=False)
    name: str = "Woodhouse"
    channel: str = "Default Channel"
    host: str = "127.0.0.1"
    port: int = Field(default=10011, ge=1, le=65535)
    verbose: bool = False

    @field_validator("sid", mode="before")
    @classmethod
    def _sid_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def with_overrides(self, **changes: Any) -> "BotOptions":
        """Copy with non-empty changes applied (credential or channel override)."""
        update = {k: v for k, v in changes.items() if v}
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})


def _read_env(env: Mapping[str, str] | None, env_file: Path | None) -> dict[str, str]:
    """Environment view: .env file values overlaid by the real environment."""
    merged: dict[str, str] = {}
    if env_file is not None and env_file.exists():
        merged.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    merged.update(os.environ if env is None else env)
    return merged


def load_options(
    explicit: Mapping[str, Any] | None = None,
    settings: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    env_file: Path | None = None,
) -> BotOptions:
    """Resolve each option: environment > explicit > settings 'bot' section > default.

    The password additionally falls back to the OS keyring before the default.
    """
    environ = _read_env(env, env_file)
    explicit = explicit or {}
    from_settings = (settings or {}).get("bot") or {}
    values: dict[str, Any] = {}
    for option, env_key in ENV_KEYS.items():
        env_value = environ.get(env_key)
        if option == "verbose" and env_key in environ:
            values[option] = bool(env_value) or bool(explicit.get(option))
        elif env_value:
            values[option] = env_value
        elif explicit.get(option) not in (None, ""):
            values[option] = explicit[option]
        elif from_settings.get(option) not in (None, ""):
            values[option] = from_settings[option]

    if "password" not in values:
        stored = keyring_password(values.get("user"))
        if stored:
            values["password"] = stored
    return BotOptions.model_validate(values)
