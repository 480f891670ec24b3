"""Recording progress observer."""

from __future__ import annotations

from plansync.core.engine.progress import SyncProgress


class RecordingProgress(SyncProgress):
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def phase_start(self, phase: str, total: int | None = None) -> None:
        self.events.append(("start", phase))

    def item_done(self, phase: str) -> None:
        self.events.append(("item", phase))

    def phase_done(self, phase: str) -> None:
        self.events.append(("done", phase))

    def phase_error(self, phase: str, error: BaseException) -> None:
        self.events.append(("error", phase))
