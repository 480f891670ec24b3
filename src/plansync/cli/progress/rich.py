"""Rich-based sync progress display."""

from __future__ import annotations

from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from plansync.core.engine.progress import SyncPhase, SyncProgress


class RichSyncProgress(SyncProgress):
    """Live terminal display of the fetch, reconcile and upload phases.

    Each ``with`` block starts a fresh display, so one instance can cover the
    preview pull and the applying pull of a single command::

        with progress:
            preview = asyncio.run(sdk.pull_from_remote(dry_run=True))
        with progress:
            result = asyncio.run(sdk.pull_from_remote())

    Phases reported outside a block are not shown.
    """

    _PHASE_STYLES: ClassVar[dict[str, str]] = {
        SyncPhase.FETCH: "cyan",
        SyncPhase.RECONCILE: "blue",
        SyncPhase.UPLOAD: "green",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = self._build()
        self._task_ids: dict[str, RichTaskID] = {}

    def _build(self) -> Progress:
        return Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>12}"),
            BarColumn(bar_width=24),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TextColumn("{task.fields[note]}"),
            console=self._console,
            transient=False,
        )

    def __enter__(self) -> RichSyncProgress:
        self._progress = self._build()
        self._task_ids.clear()
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def phase_start(self, phase: str, total: int | None = None) -> None:
        style = self._PHASE_STYLES.get(phase, "white")
        self._task_ids[phase] = self._progress.add_task(f"[{style}]{phase}[/]", total=total, note="")

    def item_done(self, phase: str) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is not None:
            self._progress.advance(task_id)

    def phase_done(self, phase: str) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is None:
            return
        task = self._progress.tasks[task_id]
        if task.total is None:
            # Unknown size: close the pulsing bar as one finished step.
            self._progress.update(task_id, total=1, completed=1)
        else:
            self._progress.update(task_id, completed=task.total)

    def phase_error(self, phase: str, error: BaseException) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is None:
            return
        self._progress.update(task_id, description=f"[red]✗ {phase}[/]", note=f"[red]{escape(str(error))}[/]")
        self._progress.stop_task(task_id)
