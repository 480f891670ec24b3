"""Learner progress records, one storage key per (user, schedule) pair."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.contracts.progress import UserProgress
from plansync.core.contracts.remote import RemoteDocument
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.storage.codec import read_json, write_json
from plansync.core.storage.layout import progress_key, progress_user_prefix

_LOG = logging.getLogger(__name__)


class ProgressRecordStore:
    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage

    def get(self, user_id: str, schedule_id: str) -> UserProgress | None:
        return self._load(progress_key(user_id, schedule_id))

    def save(self, progress: UserProgress) -> None:
        key = progress_key(progress.user_id, progress.schedule_id)
        write_json(self._storage, key, progress.model_dump(mode="json", by_alias=True))

    def list_for_user(self, user_id: str) -> list[UserProgress]:
        found: list[UserProgress] = []
        for key in self._storage.keys(progress_user_prefix(user_id)):
            progress = self._load(key)
            # "u1__x" + "__s1" shares the "u1__" prefix; the stored owner decides.
            if progress is not None and progress.user_id == user_id:
                found.append(progress)
        return found

    def delete(self, user_id: str, schedule_id: str) -> None:
        self._storage.delete(progress_key(user_id, schedule_id))

    @staticmethod
    def to_remote_document(progress: UserProgress) -> RemoteDocument:
        return {**progress.model_dump(mode="json", by_alias=True), "id": progress.document_id}

    @staticmethod
    def from_remote_document(document: RemoteDocument) -> UserProgress:
        return UserProgress.model_validate({key: value for key, value in document.items() if key != "id"})

    def _load(self, key: str) -> UserProgress | None:
        try:
            raw = read_json(self._storage, key)
            if raw is None:
                return None
            return UserProgress.model_validate(raw)
        except StorageCorruptError as exc:
            _LOG.error("Progress record '%s' is corrupt; ignoring it: %s", key, exc)
        except ValidationError as exc:
            _LOG.error("Progress record '%s' has an invalid shape; ignoring it: %s", key, exc)
        return None
