"""Shared file I/O utilities for ttynamed."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union


def read_json_file(path: Union[str, Path]) -> Optional[dict]:
    """Read a JSON object from *path*.

    Returns ``None`` if the file does not exist. Unreadable files and
    invalid JSON raise, so a corrupt bindings file is never mistaken for
    an empty one and then overwritten.

    Raises:
        OSError: The file exists but could not be read.
        ValueError: The file is not a JSON object.
    """
    p = Path(path)
    if not p.exists():
        return None
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def write_json_file(path: Union[str, Path], data: dict) -> None:
    """Atomically write *data* as JSON to *path*.

    Writes to a temporary file in the same directory and renames, so
    readers never see a half-written file.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix=f".{p.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, str(p))
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
