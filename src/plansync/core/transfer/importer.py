"""JSON study-plan import."""

from __future__ import annotations

import json
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.curriculum import StudyPlan
from plansync.core.contracts.exceptions import ImportValidationError

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_plan_id(clock: Clock = now_ms) -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"plan_{clock()}_{suffix}"


@dataclass
class ParsedImport:
    plans: list[tuple[str, StudyPlan]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class PlanImporter:
    """Turns loosely shaped JSON into validated :class:`StudyPlan` payloads.

    Accepts a single plan object or an array of plans. Missing optional
    fields are filled with defaults; each plan that cannot be used is
    reported as ``"Plan N: <reason>"`` and skipped.
    """

    def __init__(self, *, created_by: str, id_factory: Callable[[], str] | None = None) -> None:
        self._created_by = created_by
        self._id_factory = id_factory or generate_plan_id

    def load(self, source: str | Path) -> ParsedImport:
        """Parse the JSON file at *source*.

        Raises:
            ImportValidationError: The file is unreadable, not JSON, or holds no valid plan.
        """
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ImportValidationError([f"Cannot read {path}: {exc.strerror or exc}"]) from exc
        return self.parse_text(text)

    def parse_text(self, text: str) -> ParsedImport:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ImportValidationError([f"Invalid JSON: {exc.msg} (line {exc.lineno})"]) from exc
        return self.parse(data)

    def parse(self, data: Any) -> ParsedImport:
        entries = data if isinstance(data, list) else [data]
        result = ParsedImport()
        for index, entry in enumerate(entries, start=1):
            error = self._problem(entry)
            if error is not None:
                result.errors.append(f"Plan {index}: {error}")
                continue
            try:
                plan = StudyPlan.model_validate(self._normalize(entry))
            except ValidationError as exc:
                result.errors.append(f"Plan {index}: {_first_error(exc)}")
                continue
            result.plans.append((entry.get("id") or self._id_factory(), plan))

        if not result.plans:
            raise ImportValidationError(result.errors or ["No valid study plans found"])
        return result

    @staticmethod
    def _problem(entry: Any) -> str | None:
        if not isinstance(entry, dict):
            return "Expected a JSON object"
        if not entry.get("name"):
            return "Missing 'name' field"
        if not entry.get("subjectName"):
            return "Missing 'subjectName' field"
        if not isinstance(entry.get("chapters"), list):
            return "Missing or invalid 'chapters' array"
        if entry.get("id") is not None and not isinstance(entry.get("id"), str):
            return "'id' must be a string"
        return _nested_problem(entry["chapters"])

    def _normalize(self, entry: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": entry["name"],
            "subjectName": entry["subjectName"],
            "description": entry.get("description") or "",
            "examBoardId": entry.get("examBoardId") or "GENERAL",
            "difficulty": entry.get("difficulty") or "BEGINNER",
            "version": entry.get("version") or 1,
            "isDeleted": False,
            "createdBy": self._created_by,
            "chapters": [_chapter(chapter, c) for c, chapter in enumerate(entry["chapters"], start=1)],
        }


def _nested_problem(chapters: list[Any]) -> str | None:
    for c, chapter in enumerate(chapters, start=1):
        if not isinstance(chapter, dict):
            continue
        lessons = chapter.get("lessons")
        if lessons is not None and not isinstance(lessons, list):
            return f"Invalid 'lessons' in chapter {c}; expected an array"
        for n, lesson in enumerate(lessons or [], start=1):
            videos = lesson.get("videos") if isinstance(lesson, dict) else None
            if videos is not None and not isinstance(videos, list):
                return f"Invalid 'videos' in lesson {c}.{n}; expected an array"
    return None


def _chapter(raw: Any, c: int) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    return {
        "id": raw.get("id") or f"chapter_{c}",
        "name": raw.get("name") or f"Chapter {c}",
        "description": raw.get("description") or "",
        "order": raw.get("order") or c,
        "lessons": [_lesson(lesson, c, n) for n, lesson in enumerate(raw.get("lessons") or [], start=1)],
    }


def _lesson(raw: Any, c: int, n: int) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    return {
        "id": raw.get("id") or f"lesson_{c}_{n}",
        "name": raw.get("name") or f"Lesson {n}",
        "description": raw.get("description") or "",
        "order": raw.get("order") or n,
        "estimatedMinutes": raw.get("estimatedMinutes") or 30,
        "videos": [_video(video, c, n, v) for v, video in enumerate(raw.get("videos") or [], start=1)],
    }


def _video(raw: Any, c: int, n: int, v: int) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    return {
        "id": raw.get("id") or f"video_{c}_{n}_{v}",
        "title": raw.get("title") or f"Video {v}",
        "type": raw.get("type") or "YOUTUBE",
        "resourceUrl": raw.get("resourceUrl") or "",
        "thumbnailUrl": raw.get("thumbnailUrl") or None,
        "durationSeconds": raw.get("durationSeconds") or 0,
        "category": raw.get("category") or "LESSON",
    }


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]
