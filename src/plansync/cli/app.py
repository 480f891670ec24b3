"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from plansync import (
    ConfigError,
    ImportValidationError,
    PermissionDeniedError,
    RemoteError,
    StorageError,
    SyncError,
)

# First match wins; anything unlisted exits with 1.
_EXIT_CODES: tuple[tuple[tuple[type[Exception], ...], int], ...] = (
    ((ConfigError, ImportValidationError, StorageError), 3),
    ((RemoteError, PermissionDeniedError), 4),
    ((SyncError,), 5),
)

EXIT_INTERRUPTED = 130


def exit_code_for(exc: Exception) -> int:
    for error_types, code in _EXIT_CODES:
        if isinstance(exc, error_types):
            return code
    return 1


def main(argv: list[str] | None = None) -> int:
    import plansync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    command = cli.COMMANDS.get(args.command)
    if command is None:
        print(f"error: unsupported command: {args.command}", file=sys.stderr)
        return 2

    try:
        command(args)
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exit_code_for(exc)
    return 0


__all__ = ["EXIT_INTERRUPTED", "exit_code_for", "main"]
