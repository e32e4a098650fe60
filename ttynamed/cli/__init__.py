"""
ttynamed CLI: find TTY devices by friendly name.

Main commands:
- NAME / resolve NAME: print the current /dev path for a bound name
- bind DEVICE NAME: bind a name to the device currently at DEVICE
- delete NAME: remove a binding
- show NAME: print the stored criteria
- list: attached devices with their names, plus bound names not present

Entry points:
- ttynamed: console script (installed via pip)
- python -m ttynamed
- main(argv) for programmatic use
"""

from __future__ import annotations

from ttynamed.cli.helpers import (
    _make_source,
    _make_store,
    _print,
)
from ttynamed.cli.binding_cmds import (
    cmd_bind,
    cmd_delete,
    cmd_list,
    cmd_resolve,
    cmd_show,
)
from ttynamed.cli.dispatch import main

__all__ = [
    "main",
    "cmd_bind",
    "cmd_delete",
    "cmd_list",
    "cmd_resolve",
    "cmd_show",
    "_make_source",
    "_make_store",
    "_print",
]
