"""Command-line interface for plansync."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging
from collections.abc import Callable
from typing import Any

from plansync import PlanSync as PlanSync
from plansync import load_config as load_config
from plansync.cli.app import main as main
from plansync.cli.commands import browse as browse_command
from plansync.cli.commands import records as records_command
from plansync.cli.commands import sync as sync_command
from plansync.cli.parser import build_parser as build_parser

COMMANDS: dict[str, Callable[[Any], object]] = {
    "list": records_command.run_list,
    "status": records_command.run_status,
    "pull": sync_command.run_pull,
    "push": sync_command.run_push,
    "remove": records_command.run_remove,
    "import": records_command.run_import,
    "export": records_command.run_export,
    "browse": browse_command.run_browse,
    "clear": records_command.run_clear,
}

if __name__ == "__main__":
    raise SystemExit(main())
