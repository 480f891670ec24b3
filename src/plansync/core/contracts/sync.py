"""Sync result contracts."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from plansync.core.contracts.record import Record


class ReconcileResult(BaseModel):
    records: list[Record] = Field(default_factory=list)
    adopted: list[str] = Field(default_factory=list)
    refreshed: list[str] = Field(default_factory=list)
    kept_local: list[str] = Field(default_factory=list)
    discarded: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    applied: bool = False
    dry_run: bool = False


class UploadResult(BaseModel):
    uploaded: list[str] = Field(default_factory=list)
    synced: list[str] = Field(default_factory=list)
    still_dirty: list[str] = Field(default_factory=list)
    synced_at: int | None = None
    dry_run: bool = False


class BrowseResult(BaseModel):
    documents: list[dict[str, Any]] = Field(default_factory=list)
    source: Literal["cache", "remote", "stale-cache"]
    age_ms: int = 0


class ImportResult(BaseModel):
    imported: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
