"""Record store: the local collection of records and their sync metadata."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import ValidationError

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.contracts.record import Record, RecordSet
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.records.status import SyncEvent, next_status
from plansync.core.storage.codec import read_json, write_json
from plansync.core.storage.layout import STUDY_PLANS_KEY

_LOG = logging.getLogger(__name__)

ChangeKind = Literal["put", "remove", "replace", "mark-synced", "clear"]


@dataclass(frozen=True)
class StoreChange:
    kind: ChangeKind
    ids: tuple[str, ...]


StoreListener = Callable[[StoreChange], None]


class RecordStore:
    """Records of one collection, persisted as a single JSON blob.

    Every mutation reads the whole blob, changes it in memory and writes it
    back with one storage write. Mutations must not run concurrently.
    """

    def __init__(self, storage: KeyValueStore, *, key: str = STUDY_PLANS_KEY, clock: Clock = now_ms) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._listeners: list[StoreListener] = []

    @property
    def key(self) -> str:
        return self._key

    def get(self, record_id: str) -> Record | None:
        return self._load().records.get(record_id)

    def list(self) -> list[Record]:
        return list(self._load().records.values())

    def list_dirty(self) -> list[Record]:
        return self._load().dirty()

    def put(self, record_id: str, payload: Mapping[str, Any]) -> Record:
        """Insert or update a record from a local edit."""
        record_set = self._load()
        existing = record_set.records.get(record_id)
        now = self._clock()

        if existing is None:
            status = next_status(None, SyncEvent.LOCAL_CREATE, record_id=record_id)
            created_at = now
            last_synced_at = None
        else:
            status = next_status(existing.sync_status, SyncEvent.LOCAL_EDIT, record_id=record_id)
            created_at = existing.created_at
            last_synced_at = existing.last_synced_at
        if status is None:
            return existing  # type: ignore[return-value]

        record = Record(
            id=record_id,
            payload=dict(payload),
            created_at=created_at,
            updated_at=now,
            sync_status=status,
            last_synced_at=last_synced_at,
        )
        record_set.records[record_id] = record
        self._save(record_set)
        self._notify(StoreChange(kind="put", ids=(record_id,)))
        return record

    def remove(self, record_id: str) -> Record | None:
        record_set = self._load()
        removed = record_set.records.pop(record_id, None)
        if removed is None:
            return None
        self._save(record_set)
        self._notify(StoreChange(kind="remove", ids=(record_id,)))
        return removed

    def replace_all(self, records: Iterable[Record]) -> None:
        """Replace the whole collection in one write."""
        by_id: dict[str, Record] = {}
        for record in records:
            if record.id in by_id:
                _LOG.warning("Duplicate record id '%s' in replacement set; keeping the last one", record.id)
            by_id[record.id] = record
        self._save(RecordSet(records=by_id))
        self._notify(StoreChange(kind="replace", ids=tuple(by_id)))

    def mark_synced(self, snapshot: Sequence[Record], synced_at: int) -> tuple[list[str], list[str]]:
        """Flip the uploaded *snapshot* records to ``synced`` in one write.

        A record that changed or vanished since *snapshot* was captured is left
        as it is now. Returns ``(synced_ids, still_dirty_ids)``.
        """
        record_set = self._load()
        synced: list[str] = []
        still_dirty: list[str] = []

        for uploaded in snapshot:
            current = record_set.records.get(uploaded.id)
            if current is None:
                _LOG.warning("Record '%s' was removed while its upload was in flight", uploaded.id)
                continue
            if current != uploaded:
                _LOG.warning("Record '%s' changed while its upload was in flight; it stays dirty", uploaded.id)
                if current.is_dirty:
                    still_dirty.append(uploaded.id)
                continue
            status = next_status(current.sync_status, SyncEvent.UPLOAD_SUCCESS, record_id=current.id)
            if status is None:
                continue
            record_set.records[current.id] = current.model_copy(
                update={"sync_status": status, "last_synced_at": max(synced_at, current.updated_at)}
            )
            synced.append(current.id)

        if synced:
            self._save(record_set)
            self._notify(StoreChange(kind="mark-synced", ids=tuple(synced)))
        return synced, still_dirty

    def clear(self) -> None:
        self._storage.delete(self._key)
        self._notify(StoreChange(kind="clear", ids=()))

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register *listener* for change notifications; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _load(self) -> RecordSet:
        try:
            raw = read_json(self._storage, self._key)
            if raw is None:
                return RecordSet()
            return RecordSet.model_validate(raw)
        except StorageCorruptError as exc:
            _LOG.error("Local record set '%s' is corrupt; treating it as empty: %s", self._key, exc)
        except ValidationError as exc:
            _LOG.error("Local record set '%s' has an invalid shape; treating it as empty: %s", self._key, exc)
        return RecordSet()

    def _save(self, record_set: RecordSet) -> None:
        write_json(self._storage, self._key, record_set.model_dump(mode="json", by_alias=True))

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            listener(change)
