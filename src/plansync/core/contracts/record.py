"""Record contracts: the unit of synchronization and its persisted set."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator
from pydantic.alias_generators import to_camel

# Keys that belong to the record envelope rather than the payload.
ENVELOPE_FIELDS = frozenset({"id", "createdAt", "updatedAt", "isDeleted"})
# Sync metadata is local-only and never travels to the remote store.
LOCAL_ONLY_FIELDS = frozenset({"syncStatus", "lastSyncedAt"})


class SyncStatus(StrEnum):
    NEW = "new"
    MODIFIED = "modified"
    SYNCED = "synced"

    @property
    def is_dirty(self) -> bool:
        return self is not SyncStatus.SYNCED


class Record(BaseModel):
    """One synchronizable entity plus its sync metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    payload: dict[str, JsonValue] = Field(default_factory=dict)
    created_at: int
    updated_at: int
    sync_status: SyncStatus
    last_synced_at: int | None = None

    @property
    def is_dirty(self) -> bool:
        return self.sync_status.is_dirty

    @property
    def ever_synced(self) -> bool:
        """Whether the remote store has seen this record at some point."""
        return self.sync_status is not SyncStatus.NEW or self.last_synced_at is not None

    def to_remote_document(self) -> dict[str, Any]:
        document = {key: value for key, value in self.payload.items() if key not in LOCAL_ONLY_FIELDS}
        document.update(
            {
                "id": self.id,
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
                "isDeleted": False,
            }
        )
        return document

    @classmethod
    def from_remote_document(cls, document: dict[str, Any], *, synced_at: int) -> Record:
        """Adopt a remote document as a ``synced`` record.

        Raises:
            ValueError: The document has no usable ``id``.
        """
        record_id = document.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise ValueError("remote document is missing a string 'id'")
        created_at = _as_millis(document.get("createdAt"), default=synced_at)
        updated_at = _as_millis(document.get("updatedAt"), default=created_at)
        payload = {
            key: value
            for key, value in document.items()
            if key not in ENVELOPE_FIELDS and key not in LOCAL_ONLY_FIELDS
        }
        return cls(
            id=record_id,
            payload=payload,
            created_at=created_at,
            updated_at=updated_at,
            sync_status=SyncStatus.SYNCED,
            last_synced_at=max(synced_at, updated_at),
        )


class RecordSet(BaseModel):
    """All records of one collection, persisted as a single blob."""

    version: int = 1
    records: dict[str, Record] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_keys(self) -> RecordSet:
        for key, record in self.records.items():
            if key != record.id:
                raise ValueError(f"record keyed as '{key}' carries id '{record.id}'")
        return self

    def dirty(self) -> list[Record]:
        return [record for record in self.records.values() if record.is_dirty]


def _as_millis(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return default
