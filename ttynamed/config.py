"""Runtime configuration: where bindings live and which attribute source to use.

Implemented as functions (not module-level constants) so tests can
monkeypatch the environment after import.
"""

from __future__ import annotations

import os
from typing import Optional

DEFAULT_SOURCE = "pyserial"
CONFIG_FILENAME = "ttys.json"


def get_config_path(override: Optional[str] = None) -> str:
    """Return the bindings file path.

    Priority:
    1. Explicit --config override
    2. TTYNAMED_CONFIG env var
    3. $XDG_CONFIG_HOME/ttynamed/ttys.json
    4. ~/.config/ttynamed/ttys.json
    """
    if override:
        return os.path.expanduser(override)
    env = os.environ.get("TTYNAMED_CONFIG")
    if env:
        return os.path.expanduser(env)
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "ttynamed", CONFIG_FILENAME)


def get_source_name(override: Optional[str] = None) -> str:
    """Return the attribute source name (--source, then TTYNAMED_SOURCE, then pyserial)."""
    return override or os.environ.get("TTYNAMED_SOURCE") or DEFAULT_SOURCE
