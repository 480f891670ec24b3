"""Durable key-value storage contract."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Persistent map from string keys to opaque byte blobs.

    A single :meth:`write` must be atomic: readers observe either the previous
    value or the new one, never a partial blob.
    """

    @abstractmethod
    def read(self, key: str) -> bytes | None: ...  # pragma: no cover

    @abstractmethod
    def write(self, key: str, value: bytes) -> None: ...  # pragma: no cover

    @abstractmethod
    def delete(self, key: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]: ...  # pragma: no cover
