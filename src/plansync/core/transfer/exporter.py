"""JSON study-plan export."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from plansync.core.contracts.exceptions import StorageError
from plansync.core.contracts.record import Record


def export_documents(records: Iterable[Record]) -> list[dict[str, Any]]:
    """Payloads with their envelope, in the shape ``import`` accepts."""
    exported = []
    for record in records:
        document = record.to_remote_document()
        document.pop("isDeleted", None)
        exported.append(document)
    return exported


def write_export(path: str | Path, records: Iterable[Record]) -> int:
    documents = export_documents(records)
    target = Path(path)
    try:
        target.write_text(json.dumps(documents, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"failed writing export file: {target}") from exc
    return len(documents)
