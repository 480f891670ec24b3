"""Batch upload of dirty records."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.exceptions import SyncError, SyncInProgressError
from plansync.core.contracts.record import Record
from plansync.core.contracts.remote import RemoteStore
from plansync.core.contracts.sync import UploadResult
from plansync.core.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from plansync.core.records.store import RecordStore

_LOG = logging.getLogger(__name__)


class BatchUploader:
    """Pushes the dirty set in one all-or-nothing remote write.

    Local statuses change only after the remote write succeeded. Once started,
    the write and the status flip complete even if the awaiting caller is
    cancelled.
    """

    def __init__(
        self,
        store: RecordStore,
        remote: RemoteStore,
        *,
        clock: Clock = now_ms,
        progress: SyncProgress | None = None,
    ) -> None:
        self._store = store
        self._remote = remote
        self._clock = clock
        self._progress: SyncProgress = progress or NullSyncProgress()
        self._task: asyncio.Task[UploadResult] | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def upload(self, records: Sequence[Record]) -> UploadResult:
        """Upload *records*, which must be exactly the store's current dirty set.

        Raises:
            SyncInProgressError: Another upload from this uploader is running.
            SyncError: *records* does not match ``list_dirty()``.
            RemoteError: The remote write failed; nothing changed locally.
        """
        if self.in_flight:
            raise SyncInProgressError("an upload is already in flight")
        snapshot = list(records)
        self._check_matches_dirty(snapshot)
        if not snapshot:
            return UploadResult()

        task = asyncio.create_task(self._commit(snapshot))
        task.add_done_callback(self._log_detached_failure)
        self._task = task
        return await asyncio.shield(task)

    async def _commit(self, snapshot: list[Record]) -> UploadResult:
        documents = [record.to_remote_document() for record in snapshot]
        self._progress.phase_start(SyncPhase.UPLOAD, total=len(documents))
        try:
            await self._remote.batch_write(documents)
        except BaseException as exc:
            self._progress.phase_error(SyncPhase.UPLOAD, exc)
            raise
        for _ in documents:
            self._progress.item_done(SyncPhase.UPLOAD)
        self._progress.phase_done(SyncPhase.UPLOAD)

        synced_at = self._clock()
        synced, still_dirty = self._store.mark_synced(snapshot, synced_at)
        _LOG.debug("Uploaded %d record(s); %d still dirty", len(synced), len(still_dirty))
        return UploadResult(
            uploaded=[record.id for record in snapshot],
            synced=synced,
            still_dirty=still_dirty,
            synced_at=synced_at,
        )

    def _check_matches_dirty(self, snapshot: list[Record]) -> None:
        requested = {record.id: record for record in snapshot}
        current = {record.id: record for record in self._store.list_dirty()}
        if len(requested) != len(snapshot) or requested != current:
            raise SyncError("upload batch must be exactly the current dirty record set")

    @staticmethod
    def _log_detached_failure(task: asyncio.Task[UploadResult]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _LOG.debug("Upload finished with error: %s", exc)
