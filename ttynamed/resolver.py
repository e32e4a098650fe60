"""
Resolver: friendly name -> current device path.

A stateless function of the stored criteria and one enumeration snapshot.
A device is a candidate only if it matches every stored criterion exactly;
more than one candidate is an error, never a guess.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .enumerator import DeviceEnumerator, normalize_value
from .errors import AmbiguousMatchError, DeviceNotPresentError, NameNotBoundError
from .interfaces import Binding, CriteriaStoreInterface, DeviceAttributes, normalize_name

logger = logging.getLogger(__name__)


def matches(binding: Binding, device: DeviceAttributes) -> bool:
    """True if *device* satisfies every non-empty criterion of *binding*."""
    if not binding.criteria:
        return False
    for key, expected in binding.criteria.items():
        wanted = normalize_value(expected)
        if wanted is None:
            continue
        if device.criteria_value(key) != wanted:
            return False
    return True


def match(binding: Binding, candidates: Sequence[DeviceAttributes]) -> List[DeviceAttributes]:
    """Return the candidates matching *binding*, in enumeration order."""
    return [d for d in candidates if matches(binding, d)]


@dataclass
class PresentDevice:
    """An attached device and the bound names that match it."""
    device: DeviceAttributes
    names: List[str] = field(default_factory=list)


@dataclass
class Survey:
    """Attached devices cross-referenced with the stored bindings."""
    present: List[PresentDevice] = field(default_factory=list)
    missing: List[Binding] = field(default_factory=list)
    ambiguous: Dict[str, List[str]] = field(default_factory=dict)


class Resolver:
    """Looks up friendly names against the live device set."""

    def __init__(self, enumerator: DeviceEnumerator, store: CriteriaStoreInterface):
        self._enumerator = enumerator
        self._store = store

    def resolve(self, name: str) -> str:
        """Return the current device path for *name*.

        Raises:
            NameNotBoundError: name has no stored binding.
            DeviceNotPresentError: no attached device matches.
            AmbiguousMatchError: more than one attached device matches.
            ValueError: name is empty.
            EnumerationError: the device database could not be queried.
        """
        name = normalize_name(name)
        binding = self._store.get(name)
        if binding is None:
            raise NameNotBoundError(name)

        found = match(binding, self._enumerator.enumerate())
        logger.debug("%s: %d candidate(s) for %s", name, len(found), binding.criteria)

        if not found:
            raise DeviceNotPresentError(name)
        if len(found) > 1:
            raise AmbiguousMatchError(name, [d.device_path for d in found])
        return found[0].device_path

    def survey(self) -> Survey:
        """Cross-reference every binding with every attached device."""
        bindings = [b for b in (self._store.get(n) for n in self._store.list_names()) if b]
        devices = self._enumerator.enumerate()

        survey = Survey(present=[PresentDevice(device=d) for d in devices])
        for binding in bindings:
            hits = [p for p in survey.present if matches(binding, p.device)]
            if not hits:
                survey.missing.append(binding)
                continue
            for p in hits:
                p.names.append(binding.name)
            if len(hits) > 1:
                survey.ambiguous[binding.name] = [p.device.device_path for p in hits]
        return survey
