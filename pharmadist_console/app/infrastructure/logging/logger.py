import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER = "pharmadist"


def get_logger(name: str) -> logging.Logger:
    """Logger under the `pharmadist` tree, level from PHARMADIST_LOG_LEVEL."""
    qualified = name if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}.") else f"{ROOT_LOGGER}.{name}"
    logger = logging.getLogger(qualified)
    if logger.handlers:
        return logger
    level = logging.getLevelName(os.getenv("PHARMADIST_LOG_LEVEL", "INFO").strip().upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_event(
    logger: logging.Logger,
    namespace: str,
    action: str,
    outcome: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit one JSON line; `namespace` is the listing cache namespace or `sync`."""
    if not logger.isEnabledFor(level):
        return
    event = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "logger": logger.name,
        "namespace": namespace,
        "action": action,
        "outcome": outcome,
    }
    event.update(fields)
    logger.log(level, json.dumps(event, default=str))
