"""Identity contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


class Identity(BaseModel):
    user_id: str = Field(min_length=1)
    is_privileged: bool = False

    model_config = {"frozen": True}
