"""Study schedules, persisted together as one JSON list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.contracts.progress import UserProgress
from plansync.core.contracts.remote import RemoteDocument
from plansync.core.contracts.schedule import StudySchedule
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.storage.codec import read_json, write_json
from plansync.core.storage.layout import SCHEDULES_KEY
from plansync.core.tracking.store import ProgressRecordStore

_LOG = logging.getLogger(__name__)


class ScheduleStore:
    """Local study schedules, kept in list order under a single key."""

    def __init__(self, storage: KeyValueStore, *, clock: Clock = now_ms) -> None:
        self._storage = storage
        self._clock = clock

    def list_all(self) -> list[StudySchedule]:
        return self._load()

    def get(self, schedule_id: str) -> StudySchedule | None:
        return next((schedule for schedule in self._load() if schedule.id == schedule_id), None)

    def list_for_plan(self, study_plan_id: str, user_id: str | None = None) -> list[StudySchedule]:
        return [
            schedule
            for schedule in self._load()
            if schedule.study_plan_id == study_plan_id and (user_id is None or schedule.user_id == user_id)
        ]

    def save(self, schedule: StudySchedule) -> StudySchedule:
        """Insert or replace *schedule* by id and stamp its timestamps."""
        schedules = self._load()
        now = self._clock()
        for index, existing in enumerate(schedules):
            if existing.id == schedule.id:
                saved = schedule.model_copy(update={"updated_at": now})
                schedules[index] = saved
                break
        else:
            saved = schedule.model_copy(update={"created_at": now, "updated_at": now})
            schedules.append(saved)
        self._save(schedules)
        return saved

    def merge_remote(self, documents: Iterable[RemoteDocument]) -> list[StudySchedule]:
        """Adopt remote schedules over local ones with the same id, in one write.

        Local schedules the remote does not mention are kept. Returns the
        remote schedules that were adopted.
        """
        adopted: list[StudySchedule] = []
        for document in documents:
            try:
                adopted.append(StudySchedule.model_validate(document))
            except ValidationError as exc:
                _LOG.warning("Skipping invalid remote schedule '%s': %s", document.get("id"), exc)

        merged = {schedule.id: schedule for schedule in self._load()}
        for schedule in adopted:
            merged[schedule.id] = schedule
        self._save(list(merged.values()))
        return adopted

    def _load(self) -> list[StudySchedule]:
        try:
            raw = read_json(self._storage, SCHEDULES_KEY)
        except StorageCorruptError as exc:
            _LOG.error("Local schedules are corrupt; treating them as empty: %s", exc)
            return []
        if raw is None:
            return []
        if not isinstance(raw, list):
            _LOG.error("Local schedules are not a list; treating them as empty")
            return []
        schedules: list[StudySchedule] = []
        for entry in raw:
            try:
                schedules.append(StudySchedule.model_validate(entry))
            except ValidationError as exc:
                _LOG.error("Ignoring local schedule with an invalid shape: %s", exc)
        return schedules

    def _save(self, schedules: list[StudySchedule]) -> None:
        write_json(self._storage, SCHEDULES_KEY, [s.model_dump(mode="json", by_alias=True) for s in schedules])


def plan_lesson_ids(payload: Mapping[str, Any]) -> set[str]:
    """Lesson ids found in a study-plan payload's ``chapters[].lessons[]`` tree."""
    ids: set[str] = set()
    chapters = payload.get("chapters")
    for chapter in chapters if isinstance(chapters, list) else []:
        lessons = chapter.get("lessons") if isinstance(chapter, dict) else None
        for lesson in lessons if isinstance(lessons, list) else []:
            if isinstance(lesson, dict) and isinstance(lesson.get("id"), str):
                ids.add(lesson["id"])
    return ids


def find_plan_progress(
    progress_store: ProgressRecordStore,
    schedules: list[StudySchedule],
    *,
    user_id: str,
    lesson_ids: set[str],
) -> UserProgress | None:
    """The learner's progress on a plan.

    With schedules for the plan, the first schedule that has progress wins.
    Without any, the first progress record that completed one of the plan's
    lessons is used.
    """
    if schedules:
        for schedule in schedules:
            progress = progress_store.get(user_id, schedule.id)
            if progress is not None:
                return progress
        return None
    for progress in progress_store.list_for_user(user_id):
        if lesson_ids.intersection(progress.lesson_completions):
            return progress
    return None
