"""Local collection commands: list, status, remove, import, export, clear."""

from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime

from plansync import ImportResult, Record
from plansync.cli.common import confirm, format_comma_or_none, open_privileged_sdk, open_sdk, plural


def _timestamp(ms: int | None) -> str:
    if ms is None:
        return "never"
    return datetime.fromtimestamp(ms / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def format_record_table(records: list[Record]) -> str:
    if not records:
        return "No local records."
    lines = [f"{'ID':<36} {'STATUS':<9} {'UPDATED (UTC)':<20} NAME"]
    for record in sorted(records, key=lambda r: r.id):
        name = record.payload.get("name")
        lines.append(
            f"{record.id:<36} {record.sync_status.value:<9} {_timestamp(record.updated_at):<20} "
            f"{name if isinstance(name, str) else '-'}"
        )
    return "\n".join(lines)


def run_list(args: argparse.Namespace) -> list[Record]:
    sdk = open_sdk(args)
    records = sdk.list_all()
    print(format_record_table(records))
    return records


def run_status(args: argparse.Namespace) -> int:
    sdk = open_sdk(args)
    dirty = sdk.list_dirty()
    print(f"Unsynced edits: {sdk.dirty_count()}")
    print(f"  Dirty:     {format_comma_or_none(sorted(record.id for record in dirty))}")
    return sdk.dirty_count()


def run_remove(args: argparse.Namespace) -> Record | None:
    import plansync.cli as cli

    sdk = open_privileged_sdk(args)
    removed = cli.asyncio.run(sdk.remove_local(args.id))
    if removed is None:
        print(f"No local record with id '{args.id}'.")
    elif removed.ever_synced:
        print(f"Removed '{args.id}' locally and marked it deleted remotely.")
    else:
        print(f"Removed '{args.id}' (never uploaded).")
    return removed


def format_import_summary(result: ImportResult) -> str:
    lines = ["", "plansync - import complete", "", f"  Imported:  {format_comma_or_none(result.imported)}"]
    if result.errors:
        lines.append(f"  Skipped:   {plural(len(result.errors), 'plan')}")
        lines.extend(f"    - {error}" for error in result.errors)
    lines.append("  Next:      run 'plansync push' to upload")
    lines.append("")
    return "\n".join(lines)


def run_import(args: argparse.Namespace) -> ImportResult:
    sdk = open_privileged_sdk(args)
    result = sdk.import_plans(args.file)
    print(format_import_summary(result))
    return result


def run_export(args: argparse.Namespace) -> int:
    sdk = open_sdk(args)
    count = sdk.export_plans(args.file)
    print(f"Exported {plural(count, 'plan')} to {args.file}")
    return count


def run_clear(args: argparse.Namespace) -> list[str]:
    sdk = open_privileged_sdk(args)
    pending = sdk.dirty_count()
    warning = f" {plural(pending, 'unsynced edit')} will be lost." if pending else ""
    if not confirm(f"Delete all local plansync data?{warning}", assume_yes=args.yes):
        print("Cancelled; nothing was deleted.", file=sys.stderr)
        return []
    removed = sdk.clear_local_data()
    print(f"Cleared {plural(len(removed), 'storage key')}.")
    return removed


__all__ = [
    "format_import_summary",
    "format_record_table",
    "run_clear",
    "run_export",
    "run_import",
    "run_list",
    "run_remove",
    "run_status",
]
