from __future__ import annotations

import logging

import pytest

from plansync.core.engine.progress import LoggingSyncProgress, NullSyncProgress, SyncPhase, SyncProgress


def test_null_progress_accepts_full_lifecycle() -> None:
    progress = NullSyncProgress()
    assert isinstance(progress, SyncProgress)

    progress.phase_start(SyncPhase.FETCH)
    progress.item_done(SyncPhase.FETCH)
    progress.phase_done(SyncPhase.FETCH)
    progress.phase_error(SyncPhase.UPLOAD, RuntimeError("x"))


def test_phase_values_are_display_names() -> None:
    assert [phase.value for phase in SyncPhase] == ["Fetch", "Reconcile", "Upload"]
    assert SyncPhase.UPLOAD == "Upload"


def test_logging_progress_reports_counts(caplog: pytest.LogCaptureFixture) -> None:
    progress = LoggingSyncProgress()

    with caplog.at_level(logging.INFO, logger="plansync.progress"):
        progress.phase_start(SyncPhase.RECONCILE, total=2)
        progress.item_done(SyncPhase.RECONCILE)
        progress.item_done(SyncPhase.RECONCILE)
        progress.phase_done(SyncPhase.RECONCILE)
        progress.phase_start(SyncPhase.FETCH)
        progress.phase_error(SyncPhase.FETCH, RuntimeError("offline"))

    assert caplog.messages == [
        "Reconcile started (2 items)",
        "Reconcile finished after 2 items",
        "Fetch started",
        "Fetch failed: offline",
    ]
    assert caplog.records[-1].levelno == logging.ERROR
