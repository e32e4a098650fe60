"""
Interfaces for ttynamed

Data model and abstract base classes for the pluggable components.
The attribute source and criteria store are injected, so the binder and
resolver can be tested against fabricated devices without hardware.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Fields a binding may match on. device_path is deliberately absent.
CRITERIA_FIELDS = ("vendor_id", "product_id", "serial_number", "bus_path")


def normalize_name(name: Optional[str]) -> str:
    """Canonical form of a friendly name: surrounding whitespace stripped.

    Every entry point (bind, resolve, show, delete) goes through this, so a
    name is found the same way it was stored.

    Raises:
        ValueError: name is empty or whitespace only.
    """
    name = name.strip() if name else ""
    if not name:
        raise ValueError("friendly name must not be empty")
    return name


@dataclass(frozen=True)
class DeviceAttributes:
    """Identity snapshot of one attached serial device."""
    device_path: str
    vendor_id: Optional[str] = None
    product_id: Optional[str] = None
    serial_number: Optional[str] = None
    bus_path: Optional[str] = None
    manufacturer: Optional[str] = None
    product: Optional[str] = None

    def criteria_value(self, key: str) -> Optional[str]:
        """Return the value of a criteria field, or None if absent."""
        if key not in CRITERIA_FIELDS:
            raise ValueError(f"{key!r} is not a criteria field")
        return getattr(self, key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device": self.device_path,
            "vendor_id": self.vendor_id,
            "product_id": self.product_id,
            "serial_number": self.serial_number,
            "bus_path": self.bus_path,
            "manufacturer": self.manufacturer,
            "product": self.product,
        }


@dataclass(frozen=True)
class Binding:
    """
    Persistent association between a friendly name and matching criteria.

    ``criteria`` holds a subset of CRITERIA_FIELDS. It never holds the
    device path: the OS reassigns that on every replug.
    """
    name: str
    criteria: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = set(self.criteria) - set(CRITERIA_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported criteria field(s): {', '.join(sorted(unknown))}")
        # Freeze into a plain dict with only non-empty values, in canonical order.
        cleaned = {k: self.criteria[k] for k in CRITERIA_FIELDS if self.criteria.get(k)}
        object.__setattr__(self, "criteria", cleaned)

    @property
    def degraded(self) -> bool:
        """True when the binding has no serial number and depends on the port."""
        return "serial_number" not in self.criteria

    def to_dict(self) -> Dict[str, str]:
        return dict(self.criteria)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "Binding":
        return cls(name=name, criteria={k: str(v) for k, v in data.items() if v is not None})


class AttributeSourceInterface(ABC):
    """
    Abstract interface for querying the OS device database.

    Implementations:
    - PyserialAttributeSource: pyserial's list_ports (sysfs on Linux)
    - UdevadmAttributeSource: ``udevadm info`` property export
    - MockAttributeSource: in-memory, for unit tests
    """

    @abstractmethod
    def list_devices(self) -> List[Dict[str, str]]:
        """Return one raw udev-style property mapping per serial device node.

        Raises:
            EnumerationError: The device database could not be queried at all.
        """
        pass


class CriteriaStoreInterface(ABC):
    """
    Abstract interface for persisting bindings by friendly name.

    Implementations:
    - JsonCriteriaStore: JSON file with atomic replace
    - MockCriteriaStore: in-memory, for unit tests
    """

    @abstractmethod
    def get(self, name: str) -> Optional[Binding]:
        """Return the binding for name, or None if it is not bound."""
        pass

    @abstractmethod
    def put(self, name: str, binding: Binding) -> None:
        """Store binding under name, replacing any previous one."""
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Remove name. Returns True if it existed."""
        pass

    @abstractmethod
    def list_names(self) -> List[str]:
        """Return all bound names, sorted."""
        pass
