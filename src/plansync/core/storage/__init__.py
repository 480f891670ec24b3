"""Key-value storage implementations and layout."""

from plansync.core.storage.file import FileKeyValueStore
from plansync.core.storage.layout import (
    STUDY_PLANS_KEY,
    clear_local_data,
    initialize_storage,
    progress_key,
)
from plansync.core.storage.memory import InMemoryKeyValueStore

__all__ = [
    "STUDY_PLANS_KEY",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "clear_local_data",
    "initialize_storage",
    "progress_key",
]
