from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from clients.pharmadist_sdk.query_params import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS


@dataclass(frozen=True)
class AppConfig:
    search_debounce_ms: int
    default_page_size: int
    export_dir: str
    access_token: str | None
    vendor_id: str | None = None
    socket_url: str | None = None

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "AppConfig":
        load_dotenv(env_file)
        config = cls(
            search_debounce_ms=int(os.getenv("PHARMADIST_SEARCH_DEBOUNCE_MS", "500")),
            default_page_size=int(os.getenv("PHARMADIST_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
            export_dir=os.getenv("PHARMADIST_EXPORT_DIR", "out/exports").strip(),
            access_token=_optional("PHARMADIST_ACCESS_TOKEN"),
            vendor_id=_optional("PHARMADIST_VENDOR_ID"),
            socket_url=_optional("PHARMADIST_SOCKET_URL"),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.search_debounce_ms < 0:
            raise ValueError("PHARMADIST_SEARCH_DEBOUNCE_MS must be >= 0")
        if self.default_page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"PHARMADIST_DEFAULT_PAGE_SIZE must be one of {PAGE_SIZE_OPTIONS}")
        if not self.export_dir:
            raise ValueError("PHARMADIST_EXPORT_DIR cannot be empty")


def _optional(name: str) -> str | None:
    return (os.getenv(name) or "").strip() or None
