"""Command dispatch for the ttynamed CLI."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from ttynamed.errors import TtyNamedError
from ttynamed.cli.parser import _build_parser, _preprocess_argv
from ttynamed.cli.helpers import _configure_logging, _print_error

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``ttynamed`` CLI.

    Args:
        argv: Argument list to parse.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 on success, the error's exit code on failure,
        2 on usage errors.
    """
    if argv is None:
        argv = sys.argv[1:]

    # Late import to allow tests to monkeypatch ttynamed.cli._make_source etc.
    import ttynamed.cli as cli

    parser = _build_parser()
    if not argv:
        parser.print_help(sys.stderr)
        return 2

    args = parser.parse_args(_preprocess_argv(argv))
    _configure_logging(args.verbose)

    try:
        store = cli._make_store(args.config)
        if args.cmd == "resolve":
            return cli.cmd_resolve(name=args.name, source=cli._make_source(args.source),
                                   store=store, json_mode=args.json)
        if args.cmd in ("bind", "add"):
            return cli.cmd_bind(name=args.name, device=args.device, by_port=args.by_port,
                                source=cli._make_source(args.source), store=store,
                                json_mode=args.json)
        if args.cmd in ("delete", "remove"):
            return cli.cmd_delete(name=args.name, store=store, json_mode=args.json)
        if args.cmd == "show":
            return cli.cmd_show(name=args.name, store=store, json_mode=args.json)
        if args.cmd == "list":
            return cli.cmd_list(source=cli._make_source(args.source), store=store,
                                json_mode=args.json)
    except TtyNamedError as e:
        logger.debug("%s failed: %r", args.cmd, e)
        return _print_error(e, json_mode=args.json)
    except ValueError as e:
        print(f"ttynamed: error: {e}", file=sys.stderr)
        return 2

    parser.print_help(sys.stderr)
    return 2
