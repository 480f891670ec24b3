"""JSON encoding of values held in a key-value store."""

from __future__ import annotations

import json
from typing import Any

from plansync.core.contracts.exceptions import StorageCorruptError
from plansync.core.contracts.storage import KeyValueStore


def read_json(storage: KeyValueStore, key: str) -> Any | None:
    """Return the decoded value under *key*, or ``None`` when absent.

    Raises:
        StorageCorruptError: The stored bytes are not valid UTF-8 JSON.
    """
    raw = storage.read(key)
    if raw is None:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StorageCorruptError(f"stored value under '{key}' is not valid JSON", key=key) from exc


def write_json(storage: KeyValueStore, key: str, value: Any) -> None:
    # Serialize fully before touching storage so a failure never leaves a partial blob.
    encoded = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    storage.write(key, encoded)
