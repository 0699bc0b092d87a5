"""Bot settings: built-in defaults overlaid by config/settings.yaml."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
SETTINGS_FILE = "settings.yaml"

_DEFAULTS: dict[str, Any] = {
    # connection/identity values; see woodhouse.options for precedence
    "bot": {},
    "query": {"timeout": 30.0},
    "transport": {"entrypoint": None},
    "logging": {
        "file": "logs/woodhouse.log",
        "level": "INFO",
        "log_to_console": False,
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 3,
    },
}

# resolved settings.yaml path -> merged settings
_cache: dict[Path, dict[str, Any]] = {}


def _overlay(target: dict[str, Any], source: dict[str, Any]) -> None:
    """Copy source into target, descending into sections both sides define. None is skipped."""
    for key, value in source.items():
        if value is None:
            continue
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _overlay(current, value)
        else:
            target[key] = value


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def get_default_settings() -> dict[str, Any]:
    return copy.deepcopy(_DEFAULTS)


def get_setting(settings: dict[str, Any], path: str, default: Any = None) -> Any:
    """Nested value by dot path, e.g. get_setting(s, "query.timeout")."""
    node: Any = settings
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def reload_settings() -> None:
    """Forget cached settings so the next load re-reads the files."""
    _cache.clear()


def load_settings(config_dir: Path | None = None) -> dict[str, Any]:
    """Merged defaults + settings.yaml from config_dir (default: ./config). Cached per file."""
    path = ((config_dir or CONFIG_DIR) / SETTINGS_FILE).resolve()
    cached = _cache.get(path)
    if cached is not None:
        return cached
    merged = get_default_settings()
    _overlay(merged, _read_yaml(path))
    _cache[path] = merged
    return merged
