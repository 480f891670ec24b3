"""Configuration contracts."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from plansync.core.contracts.identity import UserRole


class RemoteConfig(BaseModel):
    kind: Literal["http", "memory"] = "http"
    base_url: str | None = None
    collection: str = Field(default="study_plans", min_length=1)
    progress_collection: str = Field(default="user_progress", min_length=1)
    schedule_collection: str = Field(default="study_schedules", min_length=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0, le=10)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_base_url(self) -> RemoteConfig:
        if self.kind == "http" and not (self.base_url or "").strip():
            raise ValueError("remote.base_url is required for the http remote")
        return self


class PlanSyncConfig(BaseModel):
    storage_dir: Path = Path(".plansync")
    remote: RemoteConfig = Field(default_factory=lambda: RemoteConfig(kind="memory"))
    auth: str = "none"
    token: str | None = None
    user_id: str = Field(default="admin", min_length=1)
    role: UserRole = UserRole.ADMIN
    cache_ttl_seconds: int = Field(default=300, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_auth_token(self) -> PlanSyncConfig:
        token = (self.token or "").strip()
        if self.auth == "token":
            if not token:
                raise ValueError("token auth requires a non-empty token")
            return self
        if token:
            raise ValueError("token must be unset when auth is not 'token'")
        if self.auth not in {"none", "env", "token"}:
            raise ValueError("auth must be one of: none, env, token")
        return self

    @property
    def is_privileged(self) -> bool:
        return self.role is UserRole.ADMIN
