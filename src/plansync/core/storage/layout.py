"""Local storage key layout and maintenance helpers."""

from __future__ import annotations

import logging

from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.storage.codec import read_json, write_json

_LOG = logging.getLogger(__name__)

STORAGE_VERSION = 1

STUDY_PLANS_KEY = "local_study_plans"
SNAPSHOT_KEY = "cached_study_plans"
SNAPSHOT_TIMESTAMP_KEY = "cached_study_plans_timestamp"
STORAGE_VERSION_KEY = "storage_version"
SCHEDULES_KEY = "local_schedules"
PROGRESS_PREFIX = "user_progress_"

MANAGED_KEYS = (STUDY_PLANS_KEY, SNAPSHOT_KEY, SNAPSHOT_TIMESTAMP_KEY, SCHEDULES_KEY, STORAGE_VERSION_KEY)


def progress_key(user_id: str, schedule_id: str) -> str:
    return f"{progress_user_prefix(user_id)}{schedule_id}"


def progress_user_prefix(user_id: str) -> str:
    return f"{PROGRESS_PREFIX}{user_id}__"


def initialize_storage(storage: KeyValueStore) -> int:
    """Stamp the storage version if missing and return the stored version."""
    try:
        current = read_json(storage, STORAGE_VERSION_KEY)
    except StorageCorruptError:
        _LOG.warning("Storage version stamp is unreadable; rewriting it")
        current = None
    if not isinstance(current, int) or isinstance(current, bool):
        write_json(storage, STORAGE_VERSION_KEY, STORAGE_VERSION)
        return STORAGE_VERSION
    if current > STORAGE_VERSION:
        _LOG.warning("Storage version %d is newer than supported version %d", current, STORAGE_VERSION)
    return current


def clear_local_data(storage: KeyValueStore) -> list[str]:
    """Delete every key plansync manages, then re-stamp the storage version."""
    removed: list[str] = []
    for key in (*MANAGED_KEYS, *storage.keys(PROGRESS_PREFIX)):
        if storage.read(key) is None:
            continue
        storage.delete(key)
        removed.append(key)
    initialize_storage(storage)
    return removed
