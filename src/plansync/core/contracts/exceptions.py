"""Exception hierarchy for plansync.

All plansync exceptions inherit from :class:`PlanSyncError`, so callers can
catch any library error with a single ``except`` clause while still handling
specific failure modes.
"""

from __future__ import annotations


class PlanSyncError(Exception):
    """Base exception for all plansync errors."""


class ConfigError(PlanSyncError):
    """Configuration loading or validation failure."""


class StorageError(PlanSyncError):
    """Local key-value storage failure."""


class StorageCorruptError(StorageError):
    """A persisted blob could not be parsed."""

    def __init__(self, message: str, *, key: str) -> None:
        super().__init__(message)
        self.key = key


class RemoteError(PlanSyncError):
    """Base remote store failure."""


class RemoteUnavailableError(RemoteError):
    """Network or backend failure while talking to the remote store."""


class RemoteRejectedError(RemoteError):
    """The remote store refused the request (permission, validation)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(RemoteError):
    """Authentication token could not be resolved."""


class SyncError(PlanSyncError):
    """Engine-level synchronization failure."""


class SyncInProgressError(SyncError):
    """Another remote sync operation is already in flight."""


class PermissionDeniedError(PlanSyncError):
    """The current identity is not allowed to run sync operations."""


class ImportValidationError(PlanSyncError):
    """An import source contained no valid study plans.

    Attributes:
        errors: Individual per-plan validation messages.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        joined = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Import failed:\n{joined}" if errors else "Import failed: no study plans found")
