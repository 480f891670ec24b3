"""Per-record sync-status lifecycle."""

from __future__ import annotations

import logging
from enum import StrEnum

from plansync.core.contracts.record import SyncStatus

_LOG = logging.getLogger(__name__)


class SyncEvent(StrEnum):
    LOCAL_CREATE = "local-create"
    LOCAL_EDIT = "local-edit"
    REMOTE_FETCH = "remote-fetch"
    UPLOAD_SUCCESS = "upload-success"


# ``None`` stands for "no record with this id".
TRANSITIONS: dict[tuple[SyncStatus | None, SyncEvent], SyncStatus] = {
    (None, SyncEvent.LOCAL_CREATE): SyncStatus.NEW,
    (None, SyncEvent.REMOTE_FETCH): SyncStatus.SYNCED,
    (SyncStatus.NEW, SyncEvent.LOCAL_EDIT): SyncStatus.NEW,
    (SyncStatus.MODIFIED, SyncEvent.LOCAL_EDIT): SyncStatus.MODIFIED,
    (SyncStatus.SYNCED, SyncEvent.LOCAL_EDIT): SyncStatus.MODIFIED,
    (SyncStatus.NEW, SyncEvent.UPLOAD_SUCCESS): SyncStatus.SYNCED,
    (SyncStatus.MODIFIED, SyncEvent.UPLOAD_SUCCESS): SyncStatus.SYNCED,
    (SyncStatus.SYNCED, SyncEvent.UPLOAD_SUCCESS): SyncStatus.SYNCED,
    (SyncStatus.SYNCED, SyncEvent.REMOTE_FETCH): SyncStatus.SYNCED,
    # Remote wins over un-uploaded local edits.
    (SyncStatus.NEW, SyncEvent.REMOTE_FETCH): SyncStatus.SYNCED,
    (SyncStatus.MODIFIED, SyncEvent.REMOTE_FETCH): SyncStatus.SYNCED,
}


def next_status(current: SyncStatus | None, event: SyncEvent, *, record_id: str = "?") -> SyncStatus | None:
    """Return the status after *event*, or ``None`` if the transition is not allowed.

    Rejected transitions are logged and must be treated as no-ops by the caller.
    """
    target = TRANSITIONS.get((current, event))
    if target is None:
        _LOG.warning(
            "Rejected sync-status transition for record '%s': %s on %s",
            record_id,
            event.value,
            current.value if current is not None else "absent",
        )
    return target
