"""
Mock implementations for testing.

These classes implement the abstract interfaces with in-memory behavior
suitable for unit testing without hardware.
"""

from typing import Dict, List, Optional

from .errors import EnumerationError
from .interfaces import AttributeSourceInterface, Binding, CriteriaStoreInterface


class MockAttributeSource(AttributeSourceInterface):
    """
    Mock device database.

    Test code plugs and unplugs devices with plug()/unplug(), or makes the
    whole query fail with set_fail().
    """

    def __init__(self, devices: Optional[List[Dict[str, str]]] = None):
        self._devices: List[Dict[str, str]] = [dict(d) for d in devices or []]
        self._fail: Optional[str] = None
        self.query_count = 0

    def plug(self, device_path: str, vendor_id: Optional[str] = None,
             product_id: Optional[str] = None, serial_number: Optional[str] = None,
             bus_path: Optional[str] = None, **extra: str) -> Dict[str, str]:
        props = {"DEVNAME": device_path, "ID_BUS": "usb"}
        optional = {
            "ID_VENDOR_ID": vendor_id,
            "ID_MODEL_ID": product_id,
            "ID_SERIAL_SHORT": serial_number,
            "ID_PATH": bus_path,
        }
        props.update({k: v for k, v in optional.items() if v is not None})
        props.update(extra)
        self._devices.append(props)
        return props

    def unplug(self, device_path: str) -> None:
        self._devices = [d for d in self._devices if d.get("DEVNAME") != device_path]

    def set_fail(self, message: Optional[str] = "permission denied") -> None:
        self._fail = message

    def list_devices(self) -> List[Dict[str, str]]:
        self.query_count += 1
        if self._fail:
            raise EnumerationError(self._fail)
        return [dict(d) for d in self._devices]


class MockCriteriaStore(CriteriaStoreInterface):
    """In-memory criteria store."""

    def __init__(self):
        self._bindings: Dict[str, Binding] = {}
        self.put_count = 0

    def get(self, name: str) -> Optional[Binding]:
        return self._bindings.get(name)

    def put(self, name: str, binding: Binding) -> None:
        self.put_count += 1
        self._bindings[name] = binding

    def delete(self, name: str) -> bool:
        return self._bindings.pop(name, None) is not None

    def list_names(self) -> List[str]:
        return sorted(self._bindings)
