"""Directory-backed key-value store."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote, unquote

from plansync.core.contracts.exceptions import StorageError
from plansync.core.contracts.storage import KeyValueStore

_LOG = logging.getLogger(__name__)
_SUFFIX = ".json"


class FileKeyValueStore(KeyValueStore):
    """Stores each key as one file under *root*.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def read(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"failed reading storage key '{key}': {path}") from exc

    def write(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=".tmp-", suffix=_SUFFIX)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"failed writing storage key '{key}': {path}") from exc
        _LOG.debug("Wrote %d bytes to %s", len(value), path)

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"failed deleting storage key '{key}': {path}") from exc

    def keys(self, prefix: str = "") -> list[str]:
        if not self._root.is_dir():
            return []
        found: list[str] = []
        for path in self._root.iterdir():
            if not path.is_file() or path.name.startswith(".tmp-") or not path.name.endswith(_SUFFIX):
                continue
            key = unquote(path.name[: -len(_SUFFIX)])
            if key.startswith(prefix):
                found.append(key)
        return sorted(found)

    def _path_for(self, key: str) -> Path:
        if not key:
            raise StorageError("storage key must be non-empty")
        return self._root / f"{quote(key, safe='')}{_SUFFIX}"
