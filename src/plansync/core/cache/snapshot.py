"""Timestamped cache of the last remote listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.contracts.remote import RemoteDocument
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.storage.codec import read_json, write_json
from plansync.core.storage.layout import SNAPSHOT_KEY, SNAPSHOT_TIMESTAMP_KEY

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedSnapshot:
    documents: list[RemoteDocument]
    cached_at: int
    age_ms: int


class SnapshotCache:
    """Remote listing stored as a ``(documents, timestamp)`` key pair.

    The timestamp is written after the documents, so a snapshot without a
    timestamp is never served.
    """

    def __init__(self, storage: KeyValueStore, *, ttl_ms: int, clock: Clock = now_ms) -> None:
        self._storage = storage
        self._ttl_ms = ttl_ms
        self._clock = clock

    def fresh(self) -> CachedSnapshot | None:
        snapshot = self.stale()
        if snapshot is None or snapshot.age_ms >= self._ttl_ms:
            return None
        return snapshot

    def stale(self) -> CachedSnapshot | None:
        """Return the cached snapshot regardless of its age."""
        try:
            cached_at = read_json(self._storage, SNAPSHOT_TIMESTAMP_KEY)
            documents = read_json(self._storage, SNAPSHOT_KEY)
        except StorageCorruptError as exc:
            _LOG.error("Remote snapshot cache is corrupt; ignoring it: %s", exc)
            return None
        if not isinstance(cached_at, int) or not isinstance(documents, list):
            return None
        return CachedSnapshot(
            documents=[document for document in documents if isinstance(document, dict)],
            cached_at=cached_at,
            age_ms=max(0, self._clock() - cached_at),
        )

    def store(self, documents: list[RemoteDocument]) -> None:
        write_json(self._storage, SNAPSHOT_KEY, documents)
        write_json(self._storage, SNAPSHOT_TIMESTAMP_KEY, self._clock())

    def invalidate(self) -> None:
        self._storage.delete(SNAPSHOT_TIMESTAMP_KEY)
        self._storage.delete(SNAPSHOT_KEY)
