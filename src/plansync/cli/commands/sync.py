"""Pull and push commands."""

from __future__ import annotations

import argparse
import sys

from plansync import ReconcileResult, UploadResult
from plansync.cli.common import confirm, format_comma_or_none, live, make_progress, open_privileged_sdk, plural


def format_pull_summary(result: ReconcileResult) -> str:
    mode = "dry-run" if result.dry_run else "apply"
    lines = [
        "",
        f"plansync - pull complete ({mode})",
        "",
        f"  Adopted:   {format_comma_or_none(result.adopted)}",
        f"  Refreshed: {format_comma_or_none(result.refreshed)}",
        f"  Local:     {plural(len(result.kept_local), 'record')} kept",
    ]
    if result.discarded:
        verb = "Would drop" if result.dry_run else "Dropped"
        lines.append(f"  {verb + ':':<11}{format_comma_or_none(result.discarded)} (local edits replaced by remote)")
    if result.skipped:
        lines.append(f"  Skipped:   {format_comma_or_none(result.skipped)}")
    if result.dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    elif not result.applied:
        lines.append("")
        lines.append("  Cancelled: local edits kept, nothing was written")
    lines.append("")
    return "\n".join(lines)


def run_pull(args: argparse.Namespace) -> ReconcileResult:
    import plansync.cli as cli

    progress = make_progress(args)
    sdk = open_privileged_sdk(args, progress=progress)

    with live(progress):
        preview = cli.asyncio.run(sdk.pull_from_remote(dry_run=True))
    if args.dry_run:
        print(format_pull_summary(preview))
        return preview

    approved = set(preview.discarded)
    if approved:
        message = f"Pulling replaces {plural(len(approved), 'unsynced local edit')} with the remote copy. Continue?"
        if not confirm(message, assume_yes=args.yes):
            print("Cancelled; local edits kept.", file=sys.stderr)
            return preview

    with live(progress):
        result = cli.asyncio.run(
            sdk.pull_from_remote(confirm_discard=lambda ids: args.yes or set(ids) <= approved)
        )
    print(format_pull_summary(result))
    return result


def format_push_summary(result: UploadResult) -> str:
    mode = "dry-run" if result.dry_run else "apply"
    lines = ["", f"plansync - push complete ({mode})", ""]
    if not result.uploaded:
        lines.append("  Status:    nothing to upload")
    else:
        label = "Would send" if result.dry_run else "Uploaded"
        lines.append(f"  {label + ':':<11}{format_comma_or_none(result.uploaded)}")
    if result.still_dirty:
        lines.append(f"  Pending:   {format_comma_or_none(result.still_dirty)} (edited during upload)")
    if result.dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


def run_push(args: argparse.Namespace) -> UploadResult:
    import plansync.cli as cli

    progress = make_progress(args)
    sdk = open_privileged_sdk(args, progress=progress)
    if not args.dry_run and sdk.dirty_count():
        message = f"Upload {plural(sdk.dirty_count(), 'unsynced edit')} to the remote store?"
        if not confirm(message, assume_yes=args.yes):
            print("Cancelled; nothing was uploaded.", file=sys.stderr)
            return UploadResult()

    with live(progress):
        result = cli.asyncio.run(sdk.push_to_remote(dry_run=args.dry_run))
    print(format_push_summary(result))
    return result


__all__ = ["format_pull_summary", "format_push_summary", "run_pull", "run_push"]
