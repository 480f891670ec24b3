"""Shared CLI helpers."""

from __future__ import annotations

import argparse
from contextlib import AbstractContextManager, nullcontext

import questionary

from plansync.cli.progress.rich import RichSyncProgress
from plansync.core.auth import require_privileged
from plansync.core.engine.progress import LoggingSyncProgress, SyncProgress
from plansync.sdk import PlanSync


def format_comma_or_none(values: list[str]) -> str:
    if not values:
        return "none"
    return ", ".join(values)


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def make_progress(args: argparse.Namespace) -> SyncProgress:
    """Rich progress, or plain log lines when ``--verbose`` is set."""
    if getattr(args, "verbose", False):
        return LoggingSyncProgress()
    return RichSyncProgress()


def live(progress: SyncProgress | None) -> AbstractContextManager[object]:
    return progress if isinstance(progress, RichSyncProgress) else nullcontext()


def open_sdk(args: argparse.Namespace, *, progress: SyncProgress | None = None) -> PlanSync:
    import plansync.cli as cli

    config = cli.load_config(args.config)
    return cli.asyncio.run(cli.PlanSync.from_config(config, progress=progress))


def open_privileged_sdk(args: argparse.Namespace, *, progress: SyncProgress | None = None) -> PlanSync:
    sdk = open_sdk(args, progress=progress)
    require_privileged(sdk.identity)
    return sdk


def confirm(message: str, *, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    return bool(questionary.confirm(message, default=False).ask())
