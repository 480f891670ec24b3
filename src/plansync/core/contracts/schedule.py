"""Study schedule contract."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StudySchedule(BaseModel):
    """A learner's timetable for working through one study plan.

    Progress records are keyed by schedule id, so a schedule is how a plan is
    tied to a learner's progress.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    study_plan_id: str = Field(min_length=1)
    study_plan_version: int = 1
    name: str = ""
    final_exam_date: int | None = None
    study_days: list[str] = Field(default_factory=list)
    hours_per_day: float = Field(default=1.0, ge=0)
    created_at: int = 0
    updated_at: int = 0
