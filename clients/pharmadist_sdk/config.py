from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

ENV_PREFIX = "PHARMADIST_"
DEFAULT_BASE_URL = "http://localhost:4000/api"

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})


@dataclass(frozen=True)
class SDKConfig:
    """Connection settings for the PharmaDist REST API.

    `from_env` loads the `.env` file first; variables already present in the
    process environment take precedence over the file.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    retry_max_attempts: int = 1
    retry_backoff_ms: int = 250

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "SDKConfig":
        load_dotenv(env_file)
        return cls(
            base_url=normalize_base_url(_env("BASE_URL") or DEFAULT_BASE_URL),
            timeout_seconds=float(_env("TIMEOUT_SECONDS") or 30),
            verify_ssl=parse_bool(_env("VERIFY_SSL"), default=True),
            retry_max_attempts=max(1, _env_int("RETRY_MAX_ATTEMPTS", 1)),
            retry_backoff_ms=max(0, _env_int("RETRY_BACKOFF_MS", 250)),
        )

    def with_base_url(self, base_url: str) -> "SDKConfig":
        return replace(self, base_url=normalize_base_url(base_url))


def normalize_base_url(value: str) -> str:
    # paths are joined as "/customers", so the base never keeps a trailing slash
    return value.strip().rstrip("/") or DEFAULT_BASE_URL


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    normalized = (value or "").strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def _env(name: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return value.strip() if value and value.strip() else None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc
