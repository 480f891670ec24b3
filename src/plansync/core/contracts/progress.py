"""Learner progress contracts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoProgress(_CamelModel):
    video_id: str
    lesson_id: str
    watched_seconds: int = 0
    total_seconds: int = 0
    is_completed: bool = False
    last_watched_at: int = 0


class LessonCompletion(_CamelModel):
    lesson_id: str
    is_completed: bool = False
    completed_at: int | None = None
    completed_video_ids: list[str] = Field(default_factory=list)


class DailyStats(_CamelModel):
    date: str
    videos_completed: int = 0
    minutes_studied: int = 0
    lessons_completed: int = 0


class Badge(_CamelModel):
    type: str
    title: str
    description: str = ""
    earned_at: int = 0


class UserProgress(_CamelModel):
    user_id: str = Field(min_length=1)
    schedule_id: str = Field(min_length=1)
    current_streak: int = 0
    longest_streak: int = 0
    last_updated: int = 0
    video_progress: dict[str, VideoProgress] = Field(default_factory=dict)
    lesson_completions: dict[str, LessonCompletion] = Field(default_factory=dict)
    daily_stats: dict[str, DailyStats] = Field(default_factory=dict)
    badges: list[Badge] = Field(default_factory=list)

    @property
    def document_id(self) -> str:
        return f"{self.user_id}__{self.schedule_id}"
