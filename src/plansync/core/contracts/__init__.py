"""Core contracts-domain exports."""

from plansync.core.contracts.config import PlanSyncConfig, RemoteConfig
from plansync.core.contracts.curriculum import (
    Chapter,
    Difficulty,
    Lesson,
    StudyPlan,
    VideoCategory,
    VideoResource,
    VideoType,
)
from plansync.core.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    ImportValidationError,
    PermissionDeniedError,
    PlanSyncError,
    RemoteError,
    RemoteRejectedError,
    RemoteUnavailableError,
    StorageCorruptError,
    StorageError,
    SyncError,
    SyncInProgressError,
)
from plansync.core.contracts.identity import Identity, UserRole
from plansync.core.contracts.progress import UserProgress
from plansync.core.contracts.record import Record, RecordSet, SyncStatus
from plansync.core.contracts.remote import RemoteDocument, RemoteQuery, RemoteStore
from plansync.core.contracts.schedule import StudySchedule
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.contracts.sync import BrowseResult, ImportResult, ReconcileResult, UploadResult

__all__ = [
    "AuthenticationError",
    "BrowseResult",
    "Chapter",
    "ConfigError",
    "Difficulty",
    "Identity",
    "ImportResult",
    "ImportValidationError",
    "KeyValueStore",
    "Lesson",
    "PermissionDeniedError",
    "PlanSyncConfig",
    "PlanSyncError",
    "ReconcileResult",
    "Record",
    "RecordSet",
    "RemoteConfig",
    "RemoteDocument",
    "RemoteError",
    "RemoteQuery",
    "RemoteRejectedError",
    "RemoteStore",
    "RemoteUnavailableError",
    "StorageCorruptError",
    "StorageError",
    "StudyPlan",
    "StudySchedule",
    "SyncError",
    "SyncInProgressError",
    "SyncStatus",
    "UploadResult",
    "UserProgress",
    "UserRole",
    "VideoCategory",
    "VideoResource",
    "VideoType",
]
