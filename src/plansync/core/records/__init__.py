"""Record store and sync-status lifecycle."""

from plansync.core.records.status import TRANSITIONS, SyncEvent, next_status
from plansync.core.records.store import RecordStore, StoreChange, StoreListener

__all__ = ["TRANSITIONS", "RecordStore", "StoreChange", "StoreListener", "SyncEvent", "next_status"]
