"""Phase events emitted while pulling and pushing.

A pull reports ``Fetch`` then ``Reconcile``; a push reports ``Upload``.
Consumers such as the CLI's Rich display implement :class:`SyncProgress`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import StrEnum


class SyncPhase(StrEnum):
    FETCH = "Fetch"
    RECONCILE = "Reconcile"
    UPLOAD = "Upload"


class SyncProgress(ABC):
    """Observer interface for sync phase events."""

    @abstractmethod
    def phase_start(self, phase: str, total: int | None = None) -> None:
        """A phase is starting. *total* is ``None`` when the item count is unknown."""
        ...  # pragma: no cover

    @abstractmethod
    def item_done(self, phase: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def phase_done(self, phase: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def phase_error(self, phase: str, error: BaseException) -> None:
        """The phase stopped early; no further events follow for it."""
        ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    def phase_start(self, phase: str, total: int | None = None) -> None:
        pass

    def item_done(self, phase: str) -> None:
        pass

    def phase_done(self, phase: str) -> None:
        pass

    def phase_error(self, phase: str, error: BaseException) -> None:
        pass


class LoggingSyncProgress(SyncProgress):
    """Reports phase boundaries and per-phase item counts to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger("plansync.progress")
        self._counts: dict[str, int] = {}

    def phase_start(self, phase: str, total: int | None = None) -> None:
        self._counts[phase] = 0
        if total is None:
            self._log.info("%s started", phase)
        else:
            self._log.info("%s started (%d items)", phase, total)

    def item_done(self, phase: str) -> None:
        self._counts[phase] = self._counts.get(phase, 0) + 1

    def phase_done(self, phase: str) -> None:
        self._log.info("%s finished after %d items", phase, self._counts.pop(phase, 0))

    def phase_error(self, phase: str, error: BaseException) -> None:
        self._counts.pop(phase, None)
        self._log.error("%s failed: %s", phase, error)
