"""Root logger setup for a bot process."""

import logging
import logging.handlers
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(cfg: dict[str, Any], verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    return getattr(logging, str(cfg.get("level", "INFO")).upper(), logging.INFO)


def setup_logging(
    project_root: Path, settings: dict[str, Any], verbose: bool = False
) -> None:
    """Replace root handlers with a rotating log file and, optionally, stderr.

    Config comes from the "logging" section. A verbose bot logs at DEBUG
    and always echoes to the console.
    """
    cfg = settings.get("logging") or {}
    level = _level(cfg, verbose)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = project_root / cfg.get("file", "logs/woodhouse.log")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=int(cfg.get("max_bytes", 10 * 1024 * 1024)),
            backupCount=int(cfg.get("backup_count", 3)),
            encoding="utf-8",
        )
    ]
    if verbose or cfg.get("log_to_console", False):
        handlers.append(logging.StreamHandler())

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
