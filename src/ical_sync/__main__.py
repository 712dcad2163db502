"""Entry point for ``python -m ical_sync``.

Uses stdlib :mod:`argparse` for argument parsing.

Subcommands:
    sync      -- Download every active calendar (or one with ``--calendar``).
    add       -- Register a calendar feed.
    remove    -- Forget a calendar feed.
    list      -- Show registered calendars.
    cleanup   -- Delete cached feeds of calendars that are no longer active.

Exit codes:
    0 -- Success (including nothing to do).
    1 -- A calendar failed, or a configuration/storage error occurred.
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import sys
import uuid

from ical_sync.config import ConfigError, load_settings
from ical_sync.exceptions import StorageError
from ical_sync.log import setup_logging
from ical_sync.models.calendar import CalendarItem
from ical_sync.models.sync import SyncProgress
from ical_sync.report import format_progress, print_batch_result
from ical_sync.service import ICalSyncService


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="ical-sync",
        description="Synchronize remote iCalendar feeds to a local cache.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- "sync" -------------------------------------------------------
    sync_parser = subparsers.add_parser("sync", help="Sync active calendars.")
    sync_parser.add_argument(
        "--calendar",
        metavar="ID",
        default=None,
        help="Sync only the calendar with this id.",
    )

    # --- "add" --------------------------------------------------------
    add_parser = subparsers.add_parser("add", help="Register a calendar feed.")
    add_parser.add_argument("name", help="Display name.")
    add_parser.add_argument("url", help="Feed URL (http or https).")
    add_parser.add_argument(
        "--id",
        dest="calendar_id",
        default=None,
        help="Calendar id (default: a random hex id).",
    )
    add_parser.add_argument(
        "--inactive",
        action="store_true",
        default=False,
        help="Register the calendar without including it in syncs.",
    )

    # --- "remove" -----------------------------------------------------
    remove_parser = subparsers.add_parser("remove", help="Forget a calendar feed.")
    remove_parser.add_argument("calendar_id", metavar="ID")

    subparsers.add_parser("list", help="Show registered calendars.")
    subparsers.add_parser("cleanup", help="Delete cached feeds of inactive calendars.")

    return parser


def _print_progress(progress: SyncProgress) -> None:
    print(format_progress(progress))


def _handle_sync(service: ICalSyncService, args: argparse.Namespace) -> int:
    if args.calendar is not None:
        calendar = service.store.get(args.calendar)
        if calendar is None:
            print(f"Error: Unknown calendar: {args.calendar}", file=sys.stderr)
            return 1
        outcome = service.sync_single(calendar)
        if outcome.success:
            print(f"Synced {calendar.name}")
            return 0
        print(f"Error: {calendar.name}: {outcome.error}", file=sys.stderr)
        return 1

    unsubscribe = service.progress.subscribe(_print_progress)
    try:
        result = service.sync()
    finally:
        unsubscribe()

    print_batch_result(result)
    return 0 if result.failed_count == 0 else 1


def _handle_add(service: ICalSyncService, args: argparse.Namespace) -> int:
    try:
        calendar = CalendarItem(
            id=args.calendar_id or uuid.uuid4().hex,
            name=args.name,
            url=args.url,
            is_active=not args.inactive,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    service.store.add(calendar)
    print(f"Added {calendar.name} ({calendar.id})")
    return 0


def _handle_remove(service: ICalSyncService, args: argparse.Namespace) -> int:
    if not service.store.remove(args.calendar_id):
        print(f"Error: Unknown calendar: {args.calendar_id}", file=sys.stderr)
        return 1
    print(f"Removed {args.calendar_id}")
    return 0


def _handle_list(service: ICalSyncService) -> int:
    calendars = service.store.all()
    if not calendars:
        print("No calendars registered.")
        return 0
    for calendar in calendars:
        state = "active" if calendar.is_active else "inactive"
        last = calendar.last_update.isoformat() if calendar.last_update else "never"
        print(
            f"{calendar.id}  {calendar.name}  [{state}]  "
            f"last update: {last}  failures: {calendar.num_of_fails}"
        )
    return 0


def _handle_cleanup(service: ICalSyncService) -> int:
    removed = service.cleanup_old_calendars()
    print(f"Removed {len(removed)} cached feed(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the ical-sync CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    with ICalSyncService.from_settings(settings) as service:
        try:
            if args.command == "sync":
                return _handle_sync(service, args)
            if args.command == "add":
                return _handle_add(service, args)
            if args.command == "remove":
                return _handle_remove(service, args)
            if args.command == "list":
                return _handle_list(service)
            return _handle_cleanup(service)
        except StorageError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
