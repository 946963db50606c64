import pytest

from clients.pharmadist_sdk.sync_client import SyncStarted
from pharmadist_console.app.sync_monitor import DELIVERY_LOG_SYNC_STEPS, LEDGER_SYNC_STEPS, SyncMonitor, SyncPhase


def test_progress_events_advance_steps() -> None:
    monitor = SyncMonitor(steps=LEDGER_SYNC_STEPS)
    monitor.start(SyncStarted(sync_id="s-1", stats={"totalInvoices": 4}))

    progress = monitor.apply_event(
        "sync_progress",
        {"progress": 40, "step": "SALES_INVOICES", "message": "Syncing sales invoices", "stats": {"salesSynced": 2}},
    )

    assert progress.phase is SyncPhase.RUNNING
    assert progress.stats == {"totalInvoices": 4, "salesSynced": 2}
    assert monitor.step_status("CHECKING") == "completed"
    assert monitor.step_status("SALES_INVOICES") == "active"
    assert monitor.step_status("EXPENSES") == "pending"
    assert monitor.step_status("COMPLETED") == "pending"


def test_complete_event_finishes_and_notifies() -> None:
    completed: list[dict] = []
    monitor = SyncMonitor(steps=DELIVERY_LOG_SYNC_STEPS, on_complete=completed.append)
    monitor.start()

    monitor.apply_event("sync_complete", {"stats": {"linked": 3}})
    monitor.apply_event("sync_progress", {"progress": 10, "step": "CHECKING"})

    assert monitor.progress.phase is SyncPhase.COMPLETED
    assert monitor.progress.progress == 100
    assert monitor.progress.stats == {"linked": 3}
    assert monitor.step_status("COMPLETED") == "completed"
    assert completed == [{"stats": {"linked": 3}}]
    assert [entry["step"] for entry in monitor.timeline] == ["COMPLETED"]


def test_error_event_fails_the_job() -> None:
    monitor = SyncMonitor()
    monitor.start()

    progress = monitor.apply_event("sync_error", {"error": "Ledger locked"})

    assert progress.phase is SyncPhase.FAILED
    assert progress.step == "ERROR"
    assert progress.error_message == "Ledger locked"


def test_unknown_events_and_steps_are_rejected() -> None:
    monitor = SyncMonitor()
    monitor.start()

    with pytest.raises(ValueError):
        monitor.apply_event("sync_paused", {})
    with pytest.raises(KeyError):
        monitor.step_status("LINKING")


def test_poll_stops_when_complete() -> None:
    events = iter([None, ("sync_progress", {"progress": 50, "step": "CHECKING"}), ("sync_complete", {})])
    sleeps: list[float] = []
    monitor = SyncMonitor(steps=DELIVERY_LOG_SYNC_STEPS)
    monitor.start()

    progress = monitor.poll(lambda: next(events), interval_seconds=1.5, sleeper=sleeps.append)

    assert progress.phase is SyncPhase.COMPLETED
    assert sleeps == [1.5, 1.5]


def test_poll_times_out() -> None:
    monitor = SyncMonitor(max_polls=3)
    monitor.start()

    progress = monitor.poll(lambda: None, sleeper=lambda seconds: None)

    assert progress.phase is SyncPhase.FAILED
    assert progress.error_message == "Sync timeout"
