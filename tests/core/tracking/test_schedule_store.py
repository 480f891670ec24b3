from __future__ import annotations

import logging

import pytest

from plansync.core.contracts.progress import LessonCompletion, UserProgress
from plansync.core.contracts.schedule import StudySchedule
from plansync.core.storage.memory import InMemoryKeyValueStore
from plansync.core.tracking import ProgressRecordStore, ScheduleStore, find_plan_progress, plan_lesson_ids
from tests.fakes.clock import FakeClock


def _schedule(schedule_id: str = "s1", *, user_id: str = "ada", plan_id: str = "p1", **kwargs: object) -> StudySchedule:
    fields: dict[str, object] = {
        "id": schedule_id,
        "user_id": user_id,
        "study_plan_id": plan_id,
        "name": f"Schedule {schedule_id}",
        "study_days": ["MON", "WED"],
        "hours_per_day": 1.5,
    }
    fields.update(kwargs)
    return StudySchedule.model_validate(fields)


def test_save_stamps_created_then_updated(storage: InMemoryKeyValueStore, clock: FakeClock) -> None:
    store = ScheduleStore(storage, clock=clock)
    created_at = clock.now

    first = store.save(_schedule())
    clock.advance(5_000)
    second = store.save(_schedule(name="Renamed", created_at=created_at))

    assert (first.created_at, first.updated_at) == (created_at, created_at)
    assert (second.created_at, second.updated_at) == (created_at, created_at + 5_000)
    assert store.list_all() == [second]
    assert storage.keys("local_schedules") == ["local_schedules"]


def test_list_for_plan_filters_by_plan_and_optionally_user(storage: InMemoryKeyValueStore, clock: FakeClock) -> None:
    store = ScheduleStore(storage, clock=clock)
    store.save(_schedule("s1"))
    store.save(_schedule("s2", user_id="bob"))
    store.save(_schedule("s3", plan_id="p2"))

    assert [schedule.id for schedule in store.list_for_plan("p1")] == ["s1", "s2"]
    assert [schedule.id for schedule in store.list_for_plan("p1", "bob")] == ["s2"]
    assert store.list_for_plan("missing") == []
    assert store.get("s3") is not None and store.get("nope") is None


def test_merge_remote_replaces_by_id_and_appends_new(storage: InMemoryKeyValueStore, clock: FakeClock) -> None:
    store = ScheduleStore(storage, clock=clock)
    store.save(_schedule("s1"))
    store.save(_schedule("s2"))

    adopted = store.merge_remote(
        [
            _schedule("s2", hours_per_day=3).model_dump(mode="json", by_alias=True),
            _schedule("s9").model_dump(mode="json", by_alias=True),
            {"id": "broken"},
        ]
    )

    assert [schedule.id for schedule in adopted] == ["s2", "s9"]
    assert [schedule.id for schedule in store.list_all()] == ["s1", "s2", "s9"]
    updated = store.get("s2")
    assert updated is not None and updated.hours_per_day == 3


def test_corrupt_blob_reads_as_empty(
    storage: InMemoryKeyValueStore, clock: FakeClock, caplog: pytest.LogCaptureFixture
) -> None:
    storage.write("local_schedules", b"{not json")

    with caplog.at_level(logging.ERROR, logger="plansync.core.tracking.schedules"):
        assert ScheduleStore(storage, clock=clock).list_all() == []

    assert "corrupt" in caplog.text


def test_plan_lesson_ids_tolerates_loose_payloads() -> None:
    payload = {
        "chapters": [
            {"id": "c1", "lessons": [{"id": "l1"}, {"id": "l2"}, {"name": "no id"}]},
            {"id": "c2", "lessons": "oops"},
            "not a chapter",
        ]
    }

    assert plan_lesson_ids(payload) == {"l1", "l2"}
    assert plan_lesson_ids({}) == set()


def test_find_plan_progress_prefers_schedules_then_lesson_overlap(storage: InMemoryKeyValueStore) -> None:
    progress_store = ProgressRecordStore(storage)
    by_schedule = UserProgress(user_id="ada", schedule_id="s2")
    by_lessons = UserProgress(
        user_id="ada", schedule_id="old", lesson_completions={"l2": LessonCompletion(lesson_id="l2")}
    )
    progress_store.save(by_schedule)
    progress_store.save(by_lessons)

    scheduled = find_plan_progress(
        progress_store, [_schedule("s1"), _schedule("s2")], user_id="ada", lesson_ids={"l2"}
    )
    unscheduled = find_plan_progress(progress_store, [], user_id="ada", lesson_ids={"l1", "l2"})
    unrelated = find_plan_progress(progress_store, [], user_id="ada", lesson_ids={"l7"})
    no_progress = find_plan_progress(progress_store, [_schedule("s5")], user_id="ada", lesson_ids={"l2"})

    assert scheduled == by_schedule
    assert unscheduled == by_lessons
    assert unrelated is None
    assert no_progress is None
