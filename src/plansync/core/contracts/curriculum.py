"""Curriculum contracts: study plans and their chapter/lesson/video tree."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VideoType(StrEnum):
    YOUTUBE = "YOUTUBE"
    LOCAL = "LOCAL"
    URL = "URL"


class VideoCategory(StrEnum):
    LESSON = "LESSON"
    PRACTICE = "PRACTICE"
    QUIZ = "QUIZ"
    REVIEW = "REVIEW"


class Difficulty(StrEnum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoResource(_CamelModel):
    id: str
    title: str
    type: VideoType = VideoType.YOUTUBE
    resource_url: str = ""
    thumbnail_url: str | None = None
    duration_seconds: int = Field(default=0, ge=0)
    category: VideoCategory = VideoCategory.LESSON


class Lesson(_CamelModel):
    id: str
    name: str
    description: str = ""
    order: int = 1
    estimated_minutes: int = Field(default=30, ge=0)
    videos: list[VideoResource] = Field(default_factory=list)


class Chapter(_CamelModel):
    id: str
    name: str
    description: str = ""
    order: int = 1
    lessons: list[Lesson] = Field(default_factory=list)


class StudyPlan(_CamelModel):
    """Study plan payload as stored in a record.

    The envelope fields (``id``, ``createdAt``, ``updatedAt``) live on the
    record, not here.
    """

    name: str = Field(min_length=1)
    subject_name: str = Field(min_length=1)
    description: str = ""
    exam_board_id: str = "GENERAL"
    difficulty: Difficulty = Difficulty.BEGINNER
    version: int = Field(default=1, ge=1)
    is_deleted: bool = False
    created_by: str = "admin"
    chapters: list[Chapter] = Field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        payload = self.model_dump(mode="json", by_alias=True)
        payload.pop("isDeleted", None)
        return payload
