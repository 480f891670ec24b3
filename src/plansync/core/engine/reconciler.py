"""Merge a remote snapshot into the local record set."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.record import Record
from plansync.core.contracts.remote import RemoteDocument
from plansync.core.contracts.sync import ReconcileResult
from plansync.core.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from plansync.core.records.status import SyncEvent, next_status
from plansync.core.records.store import RecordStore

_LOG = logging.getLogger(__name__)


class RemoteReconciler:
    """Remote-wins merge of a full remote snapshot.

    Records known only locally survive untouched. Records present on both
    sides take the remote copy and become ``synced``, discarding any local
    edit that was not uploaded yet; the discarded ids are reported so the
    caller can ask for confirmation before applying.
    """

    def __init__(self, store: RecordStore, *, clock: Clock = now_ms, progress: SyncProgress | None = None) -> None:
        self._store = store
        self._clock = clock
        self._progress: SyncProgress = progress or NullSyncProgress()

    def plan(self, remote_documents: Sequence[RemoteDocument]) -> ReconcileResult:
        """Compute the merged set without writing it."""
        local = {record.id: record for record in self._store.list()}
        merged: dict[str, Record] = dict(local)
        synced_at = self._clock()

        adopted: list[str] = []
        refreshed: list[str] = []
        discarded: list[str] = []
        skipped: list[str] = []
        seen: set[str] = set()

        self._progress.phase_start(SyncPhase.RECONCILE, total=len(remote_documents))
        for index, document in enumerate(remote_documents):
            label = document.get("id") if isinstance(document.get("id"), str) else f"#{index}"
            if document.get("isDeleted") is True:
                _LOG.warning("Skipping tombstoned remote document '%s'", label)
                skipped.append(str(label))
                self._progress.item_done(SyncPhase.RECONCILE)
                continue
            try:
                remote = Record.from_remote_document(document, synced_at=synced_at)
            except ValueError as exc:
                _LOG.warning("Skipping unusable remote document '%s': %s", label, exc)
                skipped.append(str(label))
                self._progress.item_done(SyncPhase.RECONCILE)
                continue
            if remote.id in seen:
                _LOG.warning("Remote snapshot lists '%s' more than once; keeping the last copy", remote.id)

            current = local.get(remote.id)
            status = next_status(
                current.sync_status if current is not None else None,
                SyncEvent.REMOTE_FETCH,
                record_id=remote.id,
            )
            if status is None:
                self._progress.item_done(SyncPhase.RECONCILE)
                continue

            if remote.id not in seen:
                if current is None:
                    adopted.append(remote.id)
                else:
                    refreshed.append(remote.id)
                    if current.is_dirty:
                        discarded.append(remote.id)
            seen.add(remote.id)
            merged[remote.id] = remote.model_copy(update={"sync_status": status})
            self._progress.item_done(SyncPhase.RECONCILE)
        self._progress.phase_done(SyncPhase.RECONCILE)

        return ReconcileResult(
            records=list(merged.values()),
            adopted=adopted,
            refreshed=refreshed,
            kept_local=[record_id for record_id in local if record_id not in seen],
            discarded=discarded,
            skipped=skipped,
        )

    def reconcile(self, remote_documents: Sequence[RemoteDocument]) -> ReconcileResult:
        """Merge and persist in a single store write."""
        result = self.plan(remote_documents)
        return self.apply(result)

    def apply(self, result: ReconcileResult) -> ReconcileResult:
        self._store.replace_all(result.records)
        if result.discarded:
            _LOG.warning("Remote copies replaced un-uploaded local edits: %s", ", ".join(result.discarded))
        return result.model_copy(update={"applied": True})
