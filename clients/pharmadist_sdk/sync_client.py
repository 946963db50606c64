from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from clients.pharmadist_sdk.api_paths import DELIVERY_LOG_SYNC, LEDGER_SYNC
from clients.pharmadist_sdk.errors import ensure_success
from clients.pharmadist_sdk.http_client import HttpClient


@dataclass(frozen=True)
class SyncStarted:
    sync_id: str | None
    stats: dict[str, Any] = field(default_factory=dict)
    raw: Any = None


class SyncClient:
    """Starts the backend sync jobs; progress arrives as sync events."""

    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    def start_ledger_sync(self, access_token: str) -> SyncStarted:
        return _parse_started(ensure_success(self.http_client.request("POST", LEDGER_SYNC, token=access_token)))

    def start_delivery_log_sync(self, access_token: str) -> SyncStarted:
        return _parse_started(ensure_success(self.http_client.request("POST", DELIVERY_LOG_SYNC, token=access_token)))


def _parse_started(payload: Any) -> SyncStarted:
    if not isinstance(payload, dict):
        return SyncStarted(sync_id=None, raw=payload)
    sync_id = payload.get("syncId") or payload.get("sync_id")
    stats = payload.get("result") if isinstance(payload.get("result"), dict) else {}
    return SyncStarted(sync_id=str(sync_id) if sync_id else None, stats=dict(stats), raw=payload)
