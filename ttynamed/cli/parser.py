"""Argument parser for the ttynamed CLI."""

from __future__ import annotations

import argparse

from ttynamed import __version__
from ttynamed.attribute_sources import SOURCES

SUBCOMMANDS = ("resolve", "bind", "add", "delete", "remove", "list", "show")

_VALUE_FLAGS = ("--config", "--source")
_BARE_FLAGS = ("--json", "-v", "--verbose")


def _preprocess_argv(argv: list[str]) -> list[str]:
    """Move global flags to the front and default the subcommand to ``resolve``.

    Allows ``ttynamed probe1`` as shorthand for ``ttynamed resolve probe1``,
    and global flags anywhere on the line. argparse can't mix a bare
    positional with subparsers, so we rewrite argv first.

    Args:
        argv: Raw argument list (without ``sys.argv[0]``).

    Returns:
        Reordered argument list.
    """
    global_args: list[str] = []
    rest: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in _BARE_FLAGS:
            global_args.append(token)
            i += 1
            continue
        if any(token.startswith(f"{flag}=") for flag in _VALUE_FLAGS):
            global_args.append(token)
            i += 1
            continue
        if token in _VALUE_FLAGS:
            if i + 1 >= len(argv):
                # Let argparse report the missing value.
                global_args.append(token)
                i += 1
                continue
            global_args.extend([token, argv[i + 1]])
            i += 2
            continue
        rest.append(token)
        i += 1

    positionals = [t for t in rest if not t.startswith("-")]
    if positionals and positionals[0] not in SUBCOMMANDS:
        rest.insert(rest.index(positionals[0]), "resolve")

    return global_args + rest


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ttynamed",
        description="ttynamed - finds TTY devices by friendly name",
        epilog="Shorthand: 'ttynamed NAME' is 'ttynamed resolve NAME'.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--json", action="store_true", help="Output machine-parseable JSON")
    parser.add_argument(
        "--config",
        default=None,
        help="Bindings file (default: $TTYNAMED_CONFIG or ~/.config/ttynamed/ttys.json)",
    )
    parser.add_argument(
        "--source",
        choices=sorted(SOURCES),
        default=None,
        help="Where device attributes come from (default: $TTYNAMED_SOURCE or pyserial)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_resolve = sub.add_parser("resolve", help="Print the current device path for a friendly name")
    p_resolve.add_argument("name", help="Friendly name of the TTY")

    p_bind = sub.add_parser("bind", aliases=["add"], help="Add or modify a tty device alias")
    p_bind.add_argument("device", help="/dev entry that the device is currently allocated to")
    p_bind.add_argument("name", help="Friendly name for the new alias")
    p_bind.add_argument(
        "--by-port",
        action="store_true",
        help="Also match on the USB port (tells identical devices apart)",
    )

    p_delete = sub.add_parser("delete", aliases=["remove"], help="Delete a tty device alias")
    p_delete.add_argument("name", help="Friendly name of the device to be deleted")

    p_show = sub.add_parser("show", help="Show the stored criteria for a friendly name")
    p_show.add_argument("name")

    sub.add_parser("list", help="Shows available TTYs and aliases")

    return parser
