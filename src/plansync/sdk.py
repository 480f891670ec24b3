"""SDK composition root for plansync."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from pathlib import Path
from typing import Any, TypeVar

from plansync.core.auth import create_identity_provider, create_token_resolver
from plansync.core.cache import SnapshotCache
from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.config import PlanSyncConfig
from plansync.core.contracts.exceptions import RemoteError, RemoteRejectedError, SyncInProgressError
from plansync.core.contracts.identity import Identity
from plansync.core.contracts.progress import UserProgress
from plansync.core.contracts.record import Record
from plansync.core.contracts.remote import RemoteQuery, RemoteStore
from plansync.core.contracts.schedule import StudySchedule
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.contracts.sync import BrowseResult, ImportResult, ReconcileResult, UploadResult
from plansync.core.engine import BatchUploader, DirtyCountObserver, RemoteReconciler
from plansync.core.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from plansync.core.records import RecordStore
from plansync.core.remote import create_remote_store
from plansync.core.storage import FileKeyValueStore, clear_local_data, initialize_storage
from plansync.core.tracking import ProgressRecordStore, ScheduleStore, find_plan_progress, plan_lesson_ids
from plansync.core.transfer import PlanImporter, generate_plan_id, write_export

_LOG = logging.getLogger(__name__)

_T = TypeVar("_T")

DiscardConfirmation = Callable[[list[str]], bool]


class PlanSync:
    """plansync SDK public API.

    Local reads and edits are synchronous and never touch the network. Remote
    operations on the study-plan collection run one at a time; starting a
    second one while another is in flight raises :class:`SyncInProgressError`.
    Once started, a remote operation completes even if its caller is
    cancelled.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStore,
        remote: RemoteStore,
        progress_remote: RemoteStore | None = None,
        schedule_remote: RemoteStore | None = None,
        identity: Identity,
        progress: SyncProgress | None = None,
        clock: Clock = now_ms,
        cache_ttl_ms: int = 300_000,
    ) -> None:
        self._storage = storage
        self._remote = remote
        self._progress_remote = progress_remote
        self._schedule_remote = schedule_remote
        self._identity = identity
        self._progress: SyncProgress = progress or NullSyncProgress()
        self._clock = clock

        initialize_storage(storage)
        self._store = RecordStore(storage, clock=clock)
        self._progress_store = ProgressRecordStore(storage)
        self._schedule_store = ScheduleStore(storage, clock=clock)
        self._cache = SnapshotCache(storage, ttl_ms=cache_ttl_ms, clock=clock)
        self._observer = DirtyCountObserver(self._store)
        self._reconciler = RemoteReconciler(self._store, clock=clock, progress=self._progress)
        self._uploader = BatchUploader(self._store, remote, clock=clock, progress=self._progress)
        self._active: asyncio.Task[Any] | None = None

    @classmethod
    async def from_config(cls, config: PlanSyncConfig, *, progress: SyncProgress | None = None) -> PlanSync:
        token = await create_token_resolver(config).resolve()
        identity = await create_identity_provider(config).resolve()
        return cls(
            storage=FileKeyValueStore(config.storage_dir),
            remote=create_remote_store(config.remote, collection=config.remote.collection, token=token),
            progress_remote=create_remote_store(
                config.remote, collection=config.remote.progress_collection, token=token
            ),
            schedule_remote=create_remote_store(
                config.remote, collection=config.remote.schedule_collection, token=token
            ),
            identity=identity,
            progress=progress,
            cache_ttl_ms=config.cache_ttl_seconds * 1000,
        )

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def sync_in_flight(self) -> bool:
        return self._active is not None and not self._active.done()

    def close(self) -> None:
        self._observer.close()

    # Local collection

    def list_all(self) -> list[Record]:
        return self._store.list()

    def get_one(self, record_id: str) -> Record | None:
        return self._store.get(record_id)

    def upsert_local(self, record_id: str, payload: Mapping[str, Any]) -> Record:
        return self._store.put(record_id, payload)

    async def remove_local(self, record_id: str) -> Record | None:
        """Remove a record, tombstoning it remotely first if the remote has seen it.

        Raises:
            RemoteError: The remote tombstone failed; the local record is kept.
        """
        record = self._store.get(record_id)
        if record is None:
            return None
        if not record.ever_synced:
            return self._store.remove(record_id)

        async def tombstone() -> Record | None:
            try:
                async with self._remote:
                    await self._remote.soft_delete(record_id)
            except RemoteRejectedError as exc:
                if exc.status_code != 404:
                    raise
                _LOG.warning("Record '%s' was already gone remotely; removing it locally", record_id)
            self._cache.invalidate()
            # Inside the shielded task so a cancelled caller cannot leave a tombstoned record behind.
            return self._store.remove(record_id)

        return await self._run_exclusive("remove", tombstone)

    def list_dirty(self) -> list[Record]:
        return self._store.list_dirty()

    def dirty_count(self) -> int:
        return self._observer.count

    def subscribe_dirty_count(self, callback: Callable[[int], None]) -> Callable[[], None]:
        """Call *callback* with the new unsynced-edit count whenever it changes."""
        return self._observer.watch(callback)

    # Remote sync

    async def pull_from_remote(
        self,
        *,
        dry_run: bool = False,
        confirm_discard: DiscardConfirmation | None = None,
    ) -> ReconcileResult:
        """Merge the remote collection into the local one, remote copy winning.

        When the merge would replace un-uploaded local edits and
        *confirm_discard* returns ``False``, nothing is written.

        Raises:
            RemoteError: The fetch failed; local state is unchanged.
            SyncInProgressError: Another remote operation is in flight.
        """

        async def pull() -> ReconcileResult:
            documents = await self._fetch(SyncPhase.FETCH)
            result = self._reconciler.plan(documents)
            if dry_run:
                return result.model_copy(update={"dry_run": True})
            self._cache.store(documents)
            if result.discarded and confirm_discard is not None and not confirm_discard(result.discarded):
                _LOG.info("Pull cancelled; %d local edit(s) kept", len(result.discarded))
                return result
            return self._reconciler.apply(result)

        return await self._run_exclusive("pull", pull)

    async def push_to_remote(self, *, dry_run: bool = False) -> UploadResult:
        """Upload every dirty record in one all-or-nothing batch.

        Raises:
            RemoteError: The write failed; no local status changed.
            SyncInProgressError: Another remote operation is in flight.
        """
        dirty = self._store.list_dirty()
        if dry_run:
            return UploadResult(uploaded=[record.id for record in dirty], dry_run=True)
        if not dirty:
            return UploadResult()

        async def push() -> UploadResult:
            async with self._remote:
                result = await self._uploader.upload(self._store.list_dirty())
            self._cache.invalidate()
            return result

        return await self._run_exclusive("push", push)

    async def browse_remote(self, *, force_refresh: bool = False) -> BrowseResult:
        """Remote listing served from the snapshot cache while it is fresh.

        A failed fetch falls back to a stale snapshot when one exists.
        """
        if not force_refresh:
            cached = self._cache.fresh()
            if cached is not None:
                return BrowseResult(documents=cached.documents, source="cache", age_ms=cached.age_ms)

        async def browse() -> BrowseResult:
            try:
                documents = await self._fetch(SyncPhase.FETCH)
            except RemoteError as exc:
                stale = self._cache.stale()
                if stale is None:
                    raise
                _LOG.warning("Remote fetch failed; serving cached listing from %d ms ago: %s", stale.age_ms, exc)
                return BrowseResult(documents=stale.documents, source="stale-cache", age_ms=stale.age_ms)
            self._cache.store(documents)
            return BrowseResult(documents=documents, source="remote")

        return await self._run_exclusive("browse", browse)

    # Import / export

    def import_plans(self, source: str | Path | Any) -> ImportResult:
        """Import study plans from a JSON file path or already-parsed JSON data.

        Raises:
            ImportValidationError: No plan in *source* could be imported.
        """
        importer = PlanImporter(created_by=self._identity.user_id, id_factory=self._generate_plan_id)
        parsed = importer.load(source) if isinstance(source, str | Path) else importer.parse(source)
        imported = [self._store.put(plan_id, plan.to_payload()).id for plan_id, plan in parsed.plans]
        for error in parsed.errors:
            _LOG.warning("Skipped during import: %s", error)
        return ImportResult(imported=imported, errors=parsed.errors)

    def export_plans(self, path: str | Path) -> int:
        return write_export(path, self._store.list())

    # Learner progress

    def get_progress(self, schedule_id: str, *, user_id: str | None = None) -> UserProgress | None:
        return self._progress_store.get(user_id or self._identity.user_id, schedule_id)

    def save_progress(self, progress: UserProgress) -> None:
        self._progress_store.save(progress)

    def list_progress_for_user(self, user_id: str | None = None) -> list[UserProgress]:
        return self._progress_store.list_for_user(user_id or self._identity.user_id)

    async def push_progress(self, schedule_id: str, *, user_id: str | None = None) -> bool:
        """Write the local progress record to the remote; ``False`` when there is none locally."""
        progress = self.get_progress(schedule_id, user_id=user_id)
        if progress is None:
            return False
        remote = self._require_remote(self._progress_remote, "progress records")
        async with remote:
            await remote.put_document(ProgressRecordStore.to_remote_document(progress))
        return True

    async def pull_progress(self, schedule_id: str, *, user_id: str | None = None) -> UserProgress | None:
        """Replace the local progress record with the remote copy, if the remote has one."""
        owner = user_id or self._identity.user_id
        remote = self._require_remote(self._progress_remote, "progress records")
        async with remote:
            document = await remote.get_document(f"{owner}__{schedule_id}")
        if document is None:
            return None
        progress = ProgressRecordStore.from_remote_document(document)
        self._progress_store.save(progress)
        return progress

    def delete_progress(self, schedule_id: str, *, user_id: str | None = None) -> None:
        """Forget the local progress record; the remote copy is left alone."""
        self._progress_store.delete(user_id or self._identity.user_id, schedule_id)

    def get_progress_for_plan(self, study_plan_id: str, *, user_id: str | None = None) -> UserProgress | None:
        """The learner's progress on a study plan, found through their schedules for it.

        Without a schedule for the plan, falls back to the first progress
        record that completed one of the plan's lessons.
        """
        owner = user_id or self._identity.user_id
        schedules = self._schedule_store.list_for_plan(study_plan_id, owner)
        record = self._store.get(study_plan_id)
        if not schedules and record is None:
            return None
        lesson_ids = plan_lesson_ids(record.payload) if record is not None else set()
        return find_plan_progress(self._progress_store, schedules, user_id=owner, lesson_ids=lesson_ids)

    # Study schedules

    def list_schedules(self) -> list[StudySchedule]:
        return self._schedule_store.list_all()

    def get_schedule(self, schedule_id: str) -> StudySchedule | None:
        return self._schedule_store.get(schedule_id)

    def get_schedules_for_plan(self, study_plan_id: str, *, user_id: str | None = None) -> list[StudySchedule]:
        """Schedules for *study_plan_id*, limited to *user_id*'s when given."""
        return self._schedule_store.list_for_plan(study_plan_id, user_id)

    def save_schedule(self, schedule: StudySchedule) -> StudySchedule:
        return self._schedule_store.save(schedule)

    async def pull_schedules(self, *, user_id: str | None = None) -> list[StudySchedule]:
        """Merge remote schedules into the local ones, remote copy winning.

        With *user_id*, only that learner's schedules are fetched. Returns the
        remote schedules that were merged.

        Raises:
            RemoteError: The fetch failed; local schedules are unchanged.
        """
        remote = self._require_remote(self._schedule_remote, "study schedules")
        query = RemoteQuery(where={"userId": user_id} if user_id else {})
        async with remote:
            documents = await remote.fetch_all(query)
        schedules = self._schedule_store.merge_remote(documents)
        _LOG.info("Pulled %d schedule(s) from remote", len(schedules))
        return schedules

    # Maintenance

    def clear_local_data(self) -> list[str]:
        """Delete every locally stored record, cache, schedule and progress entry."""
        if self.sync_in_flight:
            raise SyncInProgressError("cannot clear local data while a remote operation is in flight")
        removed = clear_local_data(self._storage)
        self._observer.recompute()
        return removed

    async def _fetch(self, phase: str) -> list[dict[str, Any]]:
        self._progress.phase_start(phase)
        try:
            async with self._remote:
                documents = await self._remote.fetch_all(RemoteQuery())
        except BaseException as exc:
            self._progress.phase_error(phase, exc)
            raise
        self._progress.phase_done(phase)
        return documents

    async def _run_exclusive(self, name: str, operation: Callable[[], Coroutine[Any, Any, _T]]) -> _T:
        if self.sync_in_flight:
            raise SyncInProgressError(f"cannot {name}: a remote operation is already in flight")
        task = asyncio.create_task(operation())
        task.add_done_callback(_log_detached_failure)
        self._active = task
        return await asyncio.shield(task)

    @staticmethod
    def _require_remote(remote: RemoteStore | None, what: str) -> RemoteStore:
        if remote is None:
            raise RemoteError(f"No remote store is configured for {what}")
        return remote

    def _generate_plan_id(self) -> str:
        return generate_plan_id(self._clock)


def _log_detached_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _LOG.debug("Remote operation finished with error: %s", exc)
