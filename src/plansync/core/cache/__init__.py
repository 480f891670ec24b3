"""Remote snapshot cache."""

from plansync.core.cache.snapshot import CachedSnapshot, SnapshotCache

__all__ = ["CachedSnapshot", "SnapshotCache"]
