from __future__ import annotations

import logging
import queue
from collections.abc import Callable
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from pharmadist_console.app.infrastructure.logging.logger import get_logger, log_event
from pharmadist_console.app.sync_monitor import SYNC_EVENTS, SyncEvent

JOIN_ROOM_EVENT = "join_vendor_room"
API_SUFFIX = "/api"


def socket_url_for(base_url: str) -> str:
    """The Socket.IO server is the API host without its `/api` prefix."""
    url = base_url.rstrip("/")
    return url[: -len(API_SUFFIX)] if url.endswith(API_SUFFIX) else url


class SyncEventChannel:
    """Socket.IO subscription to one vendor's sync events.

    Handlers run on the client's background thread and only enqueue;
    `next_event` drains the queue without blocking, which is what
    `SyncMonitor.poll` expects from an event source.
    """

    def __init__(
        self,
        url: str,
        vendor_id: str,
        client: socketio.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.url = url
        self.vendor_id = vendor_id
        self._client = client or socketio.Client(reconnection=True)
        self._logger = logger or get_logger("pharmadist.sync")
        self._events: queue.Queue[SyncEvent] = queue.Queue()
        self._client.on("connect", self._join_room)
        for name in SYNC_EVENTS:
            self._client.on(name, self._enqueue(name))

    @property
    def connected(self) -> bool:
        return bool(self._client.connected)

    def connect(self, wait_timeout: float = 5.0) -> bool:
        try:
            self._client.connect(self.url, transports=["websocket", "polling"], wait_timeout=wait_timeout)
        except SocketConnectionError as exc:
            log_event(self._logger, "sync", "socket", "unavailable", level=logging.WARNING, url=self.url, detail=str(exc))
            return False
        log_event(self._logger, "sync", "socket", "connected", url=self.url, vendor_id=self.vendor_id)
        return True

    def next_event(self) -> SyncEvent | None:
        try:
            return self._events.get_nowait()
        except queue.Empty:
            return None

    def close(self) -> None:
        if self.connected:
            self._client.disconnect()

    def _join_room(self) -> None:
        # also runs after a reconnect, so the room membership is restored
        self._client.emit(JOIN_ROOM_EVENT, self.vendor_id)

    def _enqueue(self, name: str) -> Callable[..., None]:
        def handler(data: Any = None) -> None:
            self._events.put((name, data if isinstance(data, dict) else {}))

        return handler
