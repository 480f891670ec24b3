"""In-memory key-value store."""

from __future__ import annotations

from plansync.core.contracts.storage import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used by tests and dry runs."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})
        self.writes: list[str] = []

    def read(self, key: str) -> bytes | None:
        return self._data.get(key)

    def write(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)
        self.writes.append(key)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self._data if key.startswith(prefix))
