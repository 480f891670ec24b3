"""Learner progress and study schedule storage."""

from plansync.core.tracking.schedules import ScheduleStore, find_plan_progress, plan_lesson_ids
from plansync.core.tracking.store import ProgressRecordStore

__all__ = ["ProgressRecordStore", "ScheduleStore", "find_plan_progress", "plan_lesson_ids"]
