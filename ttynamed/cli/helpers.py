"""Shared utilities for ttynamed CLI commands."""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Optional

from ttynamed.attribute_sources import get_attribute_source
from ttynamed.config import get_config_path, get_source_name
from ttynamed.criteria_store import JsonCriteriaStore
from ttynamed.errors import TtyNamedError
from ttynamed.interfaces import AttributeSourceInterface, CriteriaStoreInterface


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


def _print(obj: Any, *, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(obj, indent=2, sort_keys=True))
    else:
        if isinstance(obj, str):
            print(obj)
        else:
            print(json.dumps(obj, indent=2, sort_keys=True))


def _print_error(err: TtyNamedError, *, json_mode: bool) -> int:
    """Report *err* and return its exit code.

    Both modes write only to stderr, so a failed lookup leaves stdout empty.
    """
    if json_mode:
        payload = {
            "schema_version": 1,
            "timestamp": _now_iso(),
            "error": type(err).__name__,
            "message": str(err),
        }
        candidates = getattr(err, "candidates", None)
        if candidates:
            payload["candidates"] = candidates
        print(json.dumps(payload, indent=2, sort_keys=True), file=sys.stderr)
    else:
        print(str(err), file=sys.stderr)
    return err.exit_code


def _none(value: Optional[str]) -> str:
    return value if value is not None else "None"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _make_source(name: Optional[str]) -> AttributeSourceInterface:
    return get_attribute_source(get_source_name(name))


def _make_store(config: Optional[str]) -> CriteriaStoreInterface:
    return JsonCriteriaStore(get_config_path(config))
