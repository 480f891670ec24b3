"""Sync engine exports."""

from plansync.core.engine.observer import DirtyCountObserver
from plansync.core.engine.progress import LoggingSyncProgress, NullSyncProgress, SyncPhase, SyncProgress
from plansync.core.engine.reconciler import RemoteReconciler
from plansync.core.engine.uploader import BatchUploader

__all__ = [
    "BatchUploader",
    "DirtyCountObserver",
    "LoggingSyncProgress",
    "NullSyncProgress",
    "RemoteReconciler",
    "SyncPhase",
    "SyncProgress",
]
