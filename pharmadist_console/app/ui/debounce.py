from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], ScheduledTask]


def thread_timer_scheduler(delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


class Debouncer:
    """Delivers only the last value pushed within `wait_ms`.

    Owns at most one scheduled task. Each push cancels the pending one, and
    `close()` cancels it for good.
    """

    def __init__(
        self,
        callback: Callable[[Any], None],
        wait_ms: int = 500,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._callback = callback
        self.wait_ms = max(0, wait_ms)
        self._scheduler = scheduler or thread_timer_scheduler
        self._lock = threading.Lock()
        self._pending: ScheduledTask | None = None
        self._pending_value: Any = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: Any) -> None:
        with self._lock:
            if self._closed:
                return
            self._cancel_pending()
            if self.wait_ms == 0:
                deliver_now = True
            else:
                deliver_now = False
                self._pending_value = value
                task_holder: list[ScheduledTask] = []
                task = self._scheduler(self.wait_ms / 1000, lambda: self._fire(task_holder))
                task_holder.append(task)
                self._pending = task
        if deliver_now:
            self._callback(value)

    def flush(self) -> None:
        with self._lock:
            if self._pending is None:
                return
            value = self._pending_value
            self._cancel_pending()
        self._callback(value)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_pending()

    def close(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._closed = True

    def _fire(self, task_holder: list[ScheduledTask]) -> None:
        with self._lock:
            # a superseded task that was already running must not deliver
            if not task_holder or self._pending is not task_holder[0]:
                return
            value = self._pending_value
            self._pending = None
            self._pending_value = None
        self._callback(value)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        self._pending_value = None
