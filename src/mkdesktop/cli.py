"""mkdesktop command line - create, update, list and remove desktop entries."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

from .config import LauncherConfig, load_config
from .engine import (
    DesktopEngine,
    DesktopError,
    EntryNotFoundError,
    StaleEntryError,
    ValidationError,
)
from .models import DesktopEntry

EXIT_CONFIG = 1
EXIT_USAGE = 11
EXIT_DELETE_FAILED = 12
EXIT_PARTIAL = 13
EXIT_SAVE_FAILED = 14
EXIT_LIST_FAILED = 20


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mkdesktop",
        description="Creates/updates .desktop files in the applications directory with ease",
    )
    parser.add_argument("file", nargs="?", metavar="FILE", help="Executable file")

    fields = parser.add_argument_group("entry fields")
    fields.add_argument("--name", "-n", help="Name of program")
    fields.add_argument("--icon", "-i", help="Path to icon, or an icon name")
    fields.add_argument("--categories", "-c", help="Semicolon-separated categories")
    fields.add_argument(
        "--path",
        "-p",
        help="Working directory for when FILE gets run (default: current directory)",
    )
    fields.add_argument(
        "--tooltip",
        "-t",
        dest="comment",
        help="Tooltip when user hovers over application in launcher",
    )
    fields.add_argument(
        "--terminal",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run in a terminal (--no-terminal turns it off on update)",
    )

    actions = parser.add_argument_group("actions")
    actions.add_argument("--entry", "-e", help="Update a particular entry, by file name or by index")
    actions.add_argument("--rm", "--remove", dest="remove", help="Remove a particular entry, by file name or by index")
    actions.add_argument("--show", help="Print the desktop file of a particular entry")
    actions.add_argument("--list", "--ls", action="store_true", help="View desktop files managed by mkdesktop")
    actions.add_argument("--json", action="store_true", help="Print listings as JSON")

    parser.add_argument("--config", type=Path, help="Path to config file (default: auto-detect)")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-vv for debug)")
    return parser


def configure_logging(config: LauncherConfig, verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def error_out(message: str, code: int) -> NoReturn:
    print(message, file=sys.stderr)
    sys.exit(code)


def _absolute(value: str) -> str:
    return os.path.abspath(os.path.expanduser(value))


def entry_from_args(args: argparse.Namespace, previous: Optional[DesktopEntry]) -> DesktopEntry:
    """Build the entry to save from arguments, falling back to ``previous``."""
    if args.file:
        exec_ = _absolute(args.file)
    elif previous is not None:
        exec_ = previous.exec
    else:
        exec_ = ""

    if args.name is not None:
        name = args.name
    elif previous is not None:
        name = previous.name
    else:
        name = Path(args.file).stem if args.file else ""

    if args.icon is not None:
        # Icon paths are stored absolute; anything else is a theme icon name
        icon = _absolute(args.icon) if os.path.exists(args.icon) else args.icon
    else:
        icon = previous.icon if previous is not None else ""

    if args.path is not None:
        path = _absolute(args.path)
    elif previous is not None:
        path = previous.path
    else:
        path = os.getcwd()

    if args.terminal is not None:
        terminal = args.terminal
    else:
        terminal = previous.terminal if previous is not None else False

    def pick(value: Optional[str], attr: str) -> str:
        if value is not None:
            return value
        return getattr(previous, attr) if previous is not None else ""

    return DesktopEntry(
        name=name,
        comment=pick(args.comment, "comment"),
        path=path,
        exec=exec_,
        icon=icon,
        terminal=terminal,
        categories=pick(args.categories, "categories"),
    )


def cmd_list(engine: DesktopEngine, as_json: bool) -> None:
    try:
        entries = engine.list_entries()
    except DesktopError as e:
        error_out(f"Failed to read desktop files: {e}", EXIT_LIST_FAILED)

    if as_json:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    for i, entry in enumerate(entries):
        print(f"({i}) {entry.display()}")


def cmd_show(engine: DesktopEngine, token: str) -> None:
    try:
        entry = engine.select(token)
    except DesktopError as e:
        error_out(str(e), EXIT_USAGE)
    print(f"# {engine.entry_path(entry)}")
    print(entry.to_desktop(delete_action=engine.config.delete_action), end="")


def cmd_remove(engine: DesktopEngine, token: str) -> None:
    try:
        entry = engine.select(token)
    except DesktopError as e:
        error_out(str(e), EXIT_USAGE)

    try:
        engine.delete(entry)
    except DesktopError as e:
        error_out(f'Failed to delete entry "{entry.name}" - {e}', EXIT_DELETE_FAILED)
    print(f"Removed {entry.filename}")


def cmd_save(engine: DesktopEngine, args: argparse.Namespace) -> None:
    previous = None
    if args.entry:
        try:
            previous = engine.select(args.entry)
        except EntryNotFoundError as e:
            error_out(str(e), EXIT_USAGE)
        except DesktopError as e:
            error_out(f"Failed to read desktop files: {e}", EXIT_LIST_FAILED)

    entry = entry_from_args(args, previous)

    try:
        entry = engine.create_or_update(entry, previous)
    except ValidationError as e:
        error_out(str(e), EXIT_USAGE)
    except StaleEntryError as e:
        error_out(str(e), EXIT_PARTIAL)
    except DesktopError as e:
        error_out(f"Failed to save entry: {e}", EXIT_SAVE_FAILED)
    print(f"Saved {engine.entry_path(entry)}")


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except Exception as e:
        error_out(f"Error loading config: {e}", EXIT_CONFIG)

    configure_logging(config, args.verbose)
    engine = DesktopEngine(config)

    if args.remove:
        cmd_remove(engine, args.remove)
    elif args.show:
        cmd_show(engine, args.show)
    elif args.entry or (args.file and not args.list):
        cmd_save(engine, args)
    else:
        cmd_list(engine, args.json)


if __name__ == "__main__":  # pragma: no cover
    main()
