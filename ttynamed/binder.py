"""Binder: capture an attached device's identity under a friendly name."""

from __future__ import annotations

import logging
import warnings
from typing import Dict

from .enumerator import DeviceEnumerator
from .errors import DegradedBindingWarning, DeviceNotFoundError, UnidentifiableDeviceError
from .interfaces import Binding, CriteriaStoreInterface, DeviceAttributes, normalize_name

logger = logging.getLogger(__name__)


def select_criteria(device: DeviceAttributes, include_bus_path: bool = False) -> Dict[str, str]:
    """Pick the attributes a binding for *device* should match on.

    vendor/product/serial survives replugging into any port. Without a
    serial number the bus path stands in, tying the binding to the port.
    Absent fields are left out.
    """
    keys = ["vendor_id", "product_id"]
    if device.serial_number:
        keys.append("serial_number")
        if include_bus_path:
            keys.append("bus_path")
    else:
        keys.append("bus_path")

    criteria = {}
    for key in keys:
        value = device.criteria_value(key)
        if value:
            criteria[key] = value
    return criteria


class Binder:
    """Creates and overwrites bindings from currently attached devices."""

    def __init__(self, enumerator: DeviceEnumerator, store: CriteriaStoreInterface):
        self._enumerator = enumerator
        self._store = store

    def bind(self, name: str, device_path: str, include_bus_path: bool = False) -> Binding:
        """Bind *name* to the device currently at *device_path*.

        Args:
            name: Friendly name. Any previous binding for it is replaced.
            device_path: Current device node, e.g. ``/dev/ttyUSB0``.
            include_bus_path: Also match on the USB port, to tell apart
                devices with identical vendor/product/serial.

        Returns:
            The stored Binding.

        Raises:
            ValueError: name is empty.
            DeviceNotFoundError: No attached USB serial device at device_path.
            UnidentifiableDeviceError: The device exposes nothing to match on.
            EnumerationError: The device database could not be queried.
        """
        name = normalize_name(name)

        device = self._enumerator.find(device_path)
        if device is None:
            raise DeviceNotFoundError(device_path)

        criteria = select_criteria(device, include_bus_path=include_bus_path)
        if not criteria:
            raise UnidentifiableDeviceError(device.device_path)

        binding = Binding(name=name, criteria=criteria)
        if binding.degraded:
            if device.bus_path:
                msg = (
                    f"{device.device_path} reports no serial number; {name} is bound to "
                    f"USB port {device.bus_path} and won't resolve if moved to another port"
                )
            else:
                msg = (
                    f"{device.device_path} reports neither a serial number nor a USB port; "
                    f"{name} matches any {device.vendor_id or '?'}:{device.product_id or '?'} device and "
                    f"can't tell identical models apart"
                )
            warnings.warn(msg, DegradedBindingWarning, stacklevel=2)

        self._store.put(name, binding)
        logger.info("Bound %s to %s (%s)", name, device.device_path, binding.criteria)
        return binding
