from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from clients.pharmadist_sdk.sync_client import SyncStarted
from pharmadist_console.app.infrastructure.logging.logger import get_logger, log_event

LEDGER_SYNC_STEPS = (
    ("STARTING", "Initializing sync process"),
    ("CHECKING", "Checking existing transactions"),
    ("SALES_INVOICES", "Syncing sales invoices"),
    ("PURCHASE_INVOICES", "Syncing purchase invoices"),
    ("EXPENSES", "Syncing expenses"),
    ("COMPLETED", "Sync completed successfully"),
)

DELIVERY_LOG_SYNC_STEPS = (
    ("STARTING", "Initializing"),
    ("CHECKING", "Checking invoices"),
    ("LINKING", "Linking invoices"),
    ("COMPLETED", "Completed"),
)

SYNC_EVENTS = ("sync_progress", "sync_complete", "sync_error")

SyncEvent = tuple[str, dict[str, Any]]


class SyncPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncProgress:
    phase: SyncPhase = SyncPhase.IDLE
    progress: float = 0.0
    step: str = ""
    message: str = ""
    stats: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None
    sync_id: str | None = None


class SyncMonitor:
    """Follows a backend sync job through its progress events.

    Events come from any channel (socket push or polling) as
    `(name, data)` pairs: `sync_progress`, `sync_complete`, `sync_error`.
    """

    def __init__(
        self,
        steps: tuple[tuple[str, str], ...] = LEDGER_SYNC_STEPS,
        max_polls: int = 60,
        on_complete: Callable[[dict[str, Any]], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.steps = steps
        self.max_polls = max(1, max_polls)
        self._on_complete = on_complete
        self._logger = logger or get_logger("pharmadist.sync")
        self._progress = SyncProgress()
        self.timeline: list[dict[str, Any]] = []

    @property
    def progress(self) -> SyncProgress:
        return self._progress

    @property
    def finished(self) -> bool:
        return self._progress.phase in (SyncPhase.COMPLETED, SyncPhase.FAILED)

    def start(self, started: SyncStarted | None = None) -> SyncProgress:
        self.timeline = []
        self._progress = SyncProgress(
            phase=SyncPhase.RUNNING,
            step="STARTING",
            message="Starting sync...",
            stats=dict(started.stats) if started else {},
            sync_id=started.sync_id if started else None,
        )
        log_event(self._logger, "sync", "start", "running", sync_id=self._progress.sync_id)
        return self._progress

    def fail(self, message: str) -> SyncProgress:
        self._progress = replace(self._progress, phase=SyncPhase.FAILED, step="ERROR", message="Sync failed", error_message=message)
        self._record("ERROR", message, 0)
        log_event(self._logger, "sync", "error", "failed", level=logging.WARNING, sync_id=self._progress.sync_id, detail=message)
        return self._progress

    def apply_event(self, name: str, data: dict[str, Any] | None = None) -> SyncProgress:
        data = data or {}
        if self.finished:
            return self._progress

        if name == "sync_progress":
            self._progress = replace(
                self._progress,
                progress=float(data.get("progress") or 0),
                step=str(data.get("step") or ""),
                message=str(data.get("message") or ""),
                stats={**self._progress.stats, **(data.get("stats") or {})},
            )
            self._record(self._progress.step, self._progress.message, self._progress.progress, data.get("timestamp"))
        elif name == "sync_complete":
            self._progress = replace(
                self._progress,
                phase=SyncPhase.COMPLETED,
                progress=100.0,
                step="COMPLETED",
                message="Sync completed",
                stats={**self._progress.stats, **(data.get("stats") or {})},
            )
            self._record("COMPLETED", self._progress.message, 100)
            log_event(self._logger, "sync", "complete", "success", sync_id=self._progress.sync_id)
            if self._on_complete:
                self._on_complete(data)
        elif name == "sync_error":
            self.fail(str(data.get("error") or "Sync failed"))
        else:
            raise ValueError(f"unknown sync event: {name}")
        return self._progress

    def step_status(self, key: str) -> str:
        order = [step_key for step_key, _ in self.steps]
        if key not in order:
            raise KeyError(key)
        if key == "COMPLETED" and (self._progress.phase is SyncPhase.COMPLETED or self._progress.progress >= 100):
            return "completed"
        current = order.index(self._progress.step) if self._progress.step in order else -1
        index = order.index(key)
        if index < current:
            return "completed"
        if index == current:
            return "active"
        return "pending"

    def poll(
        self,
        next_event: Callable[[], SyncEvent | None],
        interval_seconds: float = 2.0,
        sleeper: Callable[[float], None] | None = None,
    ) -> SyncProgress:
        """Pull events until the job finishes or the poll budget runs out."""
        sleep = sleeper or time.sleep
        for _ in range(self.max_polls):
            if self.finished:
                return self._progress
            event = next_event()
            if event is not None:
                self.apply_event(*event)
            if self.finished:
                return self._progress
            sleep(interval_seconds)
        return self.fail("Sync timeout")

    def _record(self, step: str, message: str, progress: float, timestamp: str | None = None) -> None:
        self.timeline.append({"timestamp": timestamp or time.strftime("%Y-%m-%dT%H:%M:%S"), "step": step, "message": message, "progress": progress})
