from __future__ import annotations

import logging

import pytest

from plansync.core.contracts.record import SyncStatus
from plansync.core.records.status import TRANSITIONS, SyncEvent, next_status


@pytest.mark.parametrize(
    ("current", "event", "expected"),
    [
        (None, SyncEvent.LOCAL_CREATE, SyncStatus.NEW),
        (None, SyncEvent.REMOTE_FETCH, SyncStatus.SYNCED),
        (SyncStatus.NEW, SyncEvent.LOCAL_EDIT, SyncStatus.NEW),
        (SyncStatus.SYNCED, SyncEvent.LOCAL_EDIT, SyncStatus.MODIFIED),
        (SyncStatus.MODIFIED, SyncEvent.LOCAL_EDIT, SyncStatus.MODIFIED),
        (SyncStatus.NEW, SyncEvent.UPLOAD_SUCCESS, SyncStatus.SYNCED),
        (SyncStatus.MODIFIED, SyncEvent.UPLOAD_SUCCESS, SyncStatus.SYNCED),
        (SyncStatus.SYNCED, SyncEvent.REMOTE_FETCH, SyncStatus.SYNCED),
        (SyncStatus.MODIFIED, SyncEvent.REMOTE_FETCH, SyncStatus.SYNCED),
        (SyncStatus.NEW, SyncEvent.REMOTE_FETCH, SyncStatus.SYNCED),
    ],
)
def test_allowed_transitions(current: SyncStatus | None, event: SyncEvent, expected: SyncStatus) -> None:
    assert next_status(current, event) is expected


def test_new_record_never_goes_to_modified() -> None:
    assert all(
        target is not SyncStatus.MODIFIED for (current, _), target in TRANSITIONS.items() if current is SyncStatus.NEW
    )


def test_rejected_transition_returns_none_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="plansync.core.records.status"):
        assert next_status(None, SyncEvent.LOCAL_EDIT, record_id="ghost") is None
        assert next_status(None, SyncEvent.UPLOAD_SUCCESS, record_id="ghost") is None
        assert next_status(SyncStatus.SYNCED, SyncEvent.LOCAL_CREATE, record_id="p1") is None

    assert "ghost" in caplog.text
    assert "local-create on synced" in caplog.text
