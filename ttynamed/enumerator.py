"""Device enumeration: raw attribute mappings -> normalized snapshots."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .interfaces import AttributeSourceInterface, DeviceAttributes

logger = logging.getLogger(__name__)

# udev property -> DeviceAttributes field
_FIELD_MAP = {
    "DEVNAME": "device_path",
    "ID_VENDOR_ID": "vendor_id",
    "ID_MODEL_ID": "product_id",
    "ID_SERIAL_SHORT": "serial_number",
    "ID_PATH": "bus_path",
    "ID_VENDOR_ENC": "manufacturer",
    "ID_MODEL_ENC": "product",
}

# Hex IDs compare case-insensitively, so store them lower-case.
_LOWERCASE_FIELDS = ("vendor_id", "product_id")


def normalize_value(value: Optional[str]) -> Optional[str]:
    """Trim whitespace; treat empty values as absent."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def to_device_attributes(raw: Mapping[str, str]) -> Optional[DeviceAttributes]:
    """Build a DeviceAttributes from one raw property mapping.

    Missing keys are treated as absent. Returns None when the mapping has
    no device path, since such an entry can never be a resolution result.
    """
    values: Dict[str, Optional[str]] = {}
    for key, attr in _FIELD_MAP.items():
        value = normalize_value(raw.get(key))
        if value is not None and attr in _LOWERCASE_FIELDS:
            value = value.lower()
        values[attr] = value

    if values["device_path"] is None:
        return None
    return DeviceAttributes(**values)


class DeviceEnumerator:
    """
    Lists the currently attached USB serial devices.

    Each call takes a fresh snapshot from the attribute source. Nothing is
    cached: a device present in one call may be gone in the next.
    """

    def __init__(self, source: AttributeSourceInterface):
        self._source = source

    def enumerate(self) -> List[DeviceAttributes]:
        """Return a snapshot of attached devices, sorted by device path.

        Raises:
            EnumerationError: Propagated from the attribute source.
        """
        devices: List[DeviceAttributes] = []
        for raw in self._source.list_devices():
            device = to_device_attributes(raw)
            if device is None:
                logger.debug("Dropping device entry without DEVNAME: %r", dict(raw))
                continue
            devices.append(device)
        devices.sort(key=lambda d: d.device_path)
        logger.debug("Enumerated %d serial device(s)", len(devices))
        return devices

    def find(self, device_path: str) -> Optional[DeviceAttributes]:
        """Return the attached device at device_path, or None."""
        wanted = normalize_value(device_path)
        for device in self.enumerate():
            if device.device_path == wanted:
                return device
        return None
