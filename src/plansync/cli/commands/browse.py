"""Browse command: the cached remote listing."""

from __future__ import annotations

import argparse

from plansync import BrowseResult
from plansync.cli.common import open_sdk, plural

_SOURCE_LABELS = {
    "remote": "fetched from remote",
    "cache": "from cache",
    "stale-cache": "from stale cache (remote unavailable)",
}


def format_browse(result: BrowseResult) -> str:
    age = f", {result.age_ms // 1000}s old" if result.source != "remote" else ""
    lines = [f"{plural(len(result.documents), 'remote plan')} ({_SOURCE_LABELS[result.source]}{age})"]
    for document in sorted(result.documents, key=lambda d: str(d.get("id", ""))):
        lines.append(f"  {document.get('id', '?'):<36} {document.get('name', '-')}")
    return "\n".join(lines)


def run_browse(args: argparse.Namespace) -> BrowseResult:
    import plansync.cli as cli

    sdk = open_sdk(args)
    result = cli.asyncio.run(sdk.browse_remote(force_refresh=args.refresh))
    print(format_browse(result))
    return result


__all__ = ["format_browse", "run_browse"]
