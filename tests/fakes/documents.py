"""Remote document builders."""

from __future__ import annotations

from typing import Any


def remote_document(
    record_id: str,
    name: str = "Remote plan",
    *,
    updated_at: int = 1_600_000_000_000,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "id": record_id,
        "name": name,
        "subjectName": "Physics",
        "createdAt": updated_at - 1000,
        "updatedAt": updated_at,
        "isDeleted": False,
        **extra,
    }
