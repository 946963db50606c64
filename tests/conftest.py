from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from socketio.exceptions import ConnectionError as SocketConnectionError

from clients.pharmadist_sdk.config import SDKConfig
from clients.pharmadist_sdk.http_client import HttpClient

BASE_URL = "http://api.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


def build_http_client(handler: Handler, retry_max_attempts: int = 1) -> HttpClient:
    config = SDKConfig(
        base_url=BASE_URL,
        timeout_seconds=5,
        verify_ssl=True,
        retry_max_attempts=retry_max_attempts,
        retry_backoff_ms=0,
    )
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpClient(config, client=client)


@pytest.fixture
def http_factory() -> Callable[..., HttpClient]:
    return build_http_client


class ManualTask:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if not self.cancelled:
            self.callback()


class ManualScheduler:
    def __init__(self) -> None:
        self.tasks: list[ManualTask] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(delay, callback)
        self.tasks.append(task)
        return task

    def live(self) -> list[ManualTask]:
        return [task for task in self.tasks if not task.cancelled]


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


class FakeSocketClient:
    """Records handlers and emits like socketio.Client; `server_emit` plays the server side."""

    def __init__(self, refuse: bool = False) -> None:
        self.refuse = refuse
        self.connected = False
        self.handlers: dict[str, Callable] = {}
        self.connect_calls: list[tuple[str, dict]] = []
        self.emitted: list[tuple[str, object]] = []

    def on(self, event: str, handler: Callable | None = None) -> None:
        self.handlers[event] = handler

    def connect(self, url: str, **kwargs) -> None:
        self.connect_calls.append((url, kwargs))
        if self.refuse:
            raise SocketConnectionError("Connection refused by the server")
        self.connected = True
        self.handlers["connect"]()

    def emit(self, event: str, data: object = None) -> None:
        self.emitted.append((event, data))

    def disconnect(self) -> None:
        self.connected = False

    def server_emit(self, event: str, data: object = None) -> None:
        self.handlers[event](data)


@pytest.fixture
def socket_client() -> FakeSocketClient:
    return FakeSocketClient()


@pytest.fixture
def refusing_socket_client() -> FakeSocketClient:
    return FakeSocketClient(refuse=True)
