from __future__ import annotations

import logging

import pytest

from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.storage.codec import read_json, write_json
from plansync.core.storage.layout import (
    SCHEDULES_KEY,
    SNAPSHOT_KEY,
    SNAPSHOT_TIMESTAMP_KEY,
    STORAGE_VERSION,
    STORAGE_VERSION_KEY,
    STUDY_PLANS_KEY,
    clear_local_data,
    initialize_storage,
    progress_key,
)
from plansync.core.storage.memory import InMemoryKeyValueStore


def test_progress_key_format() -> None:
    assert progress_key("user-1", "sched-9") == "user_progress_user-1__sched-9"


def test_codec_round_trip_and_corruption() -> None:
    storage = InMemoryKeyValueStore({"bad": b"\xff\xfe"})
    write_json(storage, "good", {"a": [1, "é"]})

    assert read_json(storage, "good") == {"a": [1, "é"]}
    assert read_json(storage, "missing") is None
    with pytest.raises(StorageCorruptError) as exc_info:
        read_json(storage, "bad")
    assert exc_info.value.key == "bad"


def test_initialize_storage_stamps_version_once() -> None:
    storage = InMemoryKeyValueStore()

    assert initialize_storage(storage) == STORAGE_VERSION
    assert initialize_storage(storage) == STORAGE_VERSION
    assert storage.writes == [STORAGE_VERSION_KEY]


def test_initialize_storage_warns_on_newer_version(caplog: pytest.LogCaptureFixture) -> None:
    storage = InMemoryKeyValueStore({STORAGE_VERSION_KEY: b"99"})

    with caplog.at_level(logging.WARNING, logger="plansync.core.storage.layout"):
        assert initialize_storage(storage) == 99

    assert "newer" in caplog.text


def test_clear_local_data_removes_managed_schedule_and_progress_keys_only() -> None:
    storage = InMemoryKeyValueStore(
        {
            STUDY_PLANS_KEY: b"{}",
            SNAPSHOT_KEY: b"[]",
            SNAPSHOT_TIMESTAMP_KEY: b"1",
            SCHEDULES_KEY: b"[]",
            STORAGE_VERSION_KEY: b"1",
            "user_progress_u1__s1": b"{}",
            "unrelated": b"keep",
        }
    )

    removed = clear_local_data(storage)

    assert set(removed) == {
        STUDY_PLANS_KEY,
        SNAPSHOT_KEY,
        SNAPSHOT_TIMESTAMP_KEY,
        SCHEDULES_KEY,
        STORAGE_VERSION_KEY,
        "user_progress_u1__s1",
    }
    assert storage.keys() == [STORAGE_VERSION_KEY, "unrelated"]
