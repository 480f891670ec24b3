"""Public API surface for plansync."""

__version__ = "0.3.0"

from plansync.core.auth import create_identity_provider, create_token_resolver, require_privileged
from plansync.core.config import load_config
from plansync.core.contracts.config import PlanSyncConfig, RemoteConfig
from plansync.core.contracts.curriculum import Chapter, Lesson, StudyPlan, VideoResource
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
from plansync.core.contracts.record import Record, SyncStatus
from plansync.core.contracts.remote import RemoteQuery, RemoteStore
from plansync.core.contracts.schedule import StudySchedule
from plansync.core.contracts.storage import KeyValueStore
from plansync.core.contracts.sync import BrowseResult, ImportResult, ReconcileResult, UploadResult
from plansync.core.engine.progress import LoggingSyncProgress, SyncPhase, SyncProgress
from plansync.core.remote import create_remote_store
from plansync.sdk import PlanSync

__all__ = [
    "AuthenticationError",
    "BrowseResult",
    "Chapter",
    "ConfigError",
    "Identity",
    "ImportResult",
    "ImportValidationError",
    "KeyValueStore",
    "Lesson",
    "LoggingSyncProgress",
    "PermissionDeniedError",
    "PlanSync",
    "PlanSyncConfig",
    "PlanSyncError",
    "ReconcileResult",
    "Record",
    "RemoteConfig",
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
    "SyncPhase",
    "SyncProgress",
    "SyncStatus",
    "UploadResult",
    "UserProgress",
    "UserRole",
    "VideoResource",
    "__version__",
    "create_identity_provider",
    "create_remote_store",
    "create_token_resolver",
    "load_config",
    "require_privileged",
]
