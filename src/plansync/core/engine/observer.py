"""Unsynced-edit counter derived from record store notifications."""

from __future__ import annotations

from collections.abc import Callable

from plansync.core.records.store import RecordStore, StoreChange

CountWatcher = Callable[[int], None]


class DirtyCountObserver:
    """Keeps ``len(store.list_dirty())`` current without polling.

    Watchers are called with the new count whenever it changes.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._watchers: list[CountWatcher] = []
        self._count = len(store.list_dirty())
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_change)

    @property
    def count(self) -> int:
        return self._count

    def watch(self, watcher: CountWatcher) -> Callable[[], None]:
        self._watchers.append(watcher)

        def unwatch() -> None:
            if watcher in self._watchers:
                self._watchers.remove(watcher)

        return unwatch

    def recompute(self) -> int:
        previous = self._count
        self._count = len(self._store.list_dirty())
        if self._count != previous:
            for watcher in list(self._watchers):
                watcher(self._count)
        return self._count

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._watchers.clear()

    def _on_change(self, change: StoreChange) -> None:
        self.recompute()
