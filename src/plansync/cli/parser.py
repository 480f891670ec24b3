"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from plansync.core.config import DEFAULT_CONFIG_NAME


def _package_version() -> str:
    try:
        return version("plansync")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=f"./{DEFAULT_CONFIG_NAME}", help=f"Path to {DEFAULT_CONFIG_NAME}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="plansync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List local study plans and their sync status")
    _add_common(list_parser)

    status_parser = subparsers.add_parser("status", help="Show the number of unsynced edits")
    _add_common(status_parser)

    pull_parser = subparsers.add_parser("pull", help="Merge remote study plans into the local set (remote wins)")
    pull_parser.add_argument("--dry-run", action="store_true", help="Preview mode")
    pull_parser.add_argument("--yes", "-y", action="store_true", help="Discard unsynced local edits without asking")
    _add_common(pull_parser)

    push_parser = subparsers.add_parser("push", help="Upload all unsynced edits in one batch")
    push_parser.add_argument("--dry-run", action="store_true", help="Preview mode")
    push_parser.add_argument("--yes", "-y", action="store_true", help="Upload without asking")
    _add_common(push_parser)

    remove_parser = subparsers.add_parser("remove", help="Remove a study plan (soft-deleted remotely)")
    remove_parser.add_argument("id", help="Record id")
    _add_common(remove_parser)

    import_parser = subparsers.add_parser("import", help="Import study plans from a JSON file")
    import_parser.add_argument("file", help="JSON file holding one plan or an array of plans")
    _add_common(import_parser)

    export_parser = subparsers.add_parser("export", help="Export local study plans to a JSON file")
    export_parser.add_argument("file", help="Output file path")
    _add_common(export_parser)

    browse_parser = subparsers.add_parser("browse", help="List remote study plans (cached)")
    browse_parser.add_argument("--refresh", action="store_true", help="Bypass the cache")
    _add_common(browse_parser)

    clear_parser = subparsers.add_parser("clear", help="Delete all local plansync data")
    clear_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    _add_common(clear_parser)

    return parser


__all__ = ["build_parser"]
