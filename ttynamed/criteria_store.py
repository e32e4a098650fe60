"""
JSON-file criteria store.

Layout::

    {"schema_version": 1,
     "ttys": {"probe1": {"vendor_id": "10c4", "product_id": "ea60",
                         "serial_number": "A1B2C3"}}}

Writes replace the whole file atomically. Read-modify-write cycles hold an
exclusive lock on a sidecar ``.lock`` file so two concurrent binds cannot
drop each other's entries; plain reads take no lock.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import portalocker

from .errors import CriteriaStoreError
from .file_utils import read_json_file, write_json_file
from .interfaces import Binding, CriteriaStoreInterface

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class JsonCriteriaStore(CriteriaStoreInterface):
    """Bindings persisted in a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")

    def _load(self) -> Dict[str, Dict[str, str]]:
        try:
            data = read_json_file(self.path)
        except (OSError, ValueError) as e:
            raise CriteriaStoreError(f"Error reading config file {self.path}: {e}") from e
        if data is None:
            return {}
        ttys = data.get("ttys", {})
        if not isinstance(ttys, dict) or not all(isinstance(v, dict) for v in ttys.values()):
            raise CriteriaStoreError(f"Error parsing {self.path}: 'ttys' must map names to criteria")
        return ttys

    def _save(self, ttys: Dict[str, Dict[str, str]]) -> None:
        try:
            write_json_file(self.path, {"schema_version": SCHEMA_VERSION, "ttys": ttys})
        except OSError as e:
            raise CriteriaStoreError(f"Failed to write configuration file {self.path}: {e}") from e

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            f = open(self.lock_path, "a")
        except OSError as e:
            raise CriteriaStoreError(f"Could not open lock file {self.lock_path}: {e}") from e
        with f:
            portalocker.lock(f, portalocker.LOCK_EX)
            try:
                yield
            finally:
                portalocker.unlock(f)

    def get(self, name: str) -> Optional[Binding]:
        criteria = self._load().get(name)
        if criteria is None:
            return None
        try:
            return Binding.from_dict(name, criteria)
        except ValueError as e:
            raise CriteriaStoreError(f"Invalid binding for {name!r} in {self.path}: {e}") from e

    def put(self, name: str, binding: Binding) -> None:
        with self._locked():
            ttys = self._load()
            ttys[name] = binding.to_dict()
            self._save(ttys)
        logger.debug("Stored binding %s -> %s", name, json.dumps(binding.to_dict(), sort_keys=True))

    def delete(self, name: str) -> bool:
        with self._locked():
            ttys = self._load()
            if name not in ttys:
                return False
            del ttys[name]
            self._save(ttys)
        logger.debug("Removed binding %s", name)
        return True

    def list_names(self) -> List[str]:
        return sorted(self._load())
