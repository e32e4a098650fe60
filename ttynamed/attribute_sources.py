"""Attribute sources: where raw per-device properties come from.

Both sources emit udev property names (DEVNAME, ID_VENDOR_ID, ...), so the
enumerator only has to understand one vocabulary. ID_PATH always carries the
USB interface name pyserial calls ``location`` (e.g. ``1-1.2:1.0``), so a
binding made through one source resolves through the other.
"""

from __future__ import annotations

import glob
import logging
import os
import re
import subprocess
from typing import Dict, List, Optional

import serial.tools.list_ports

from .errors import EnumerationError
from .interfaces import AttributeSourceInterface

logger = logging.getLogger(__name__)

_UDEV_PROPERTY = re.compile(r"^(\w+)='(.*)'$")
_HEX_ESCAPE = re.compile(r"\\x([0-9A-Fa-f]{2})")
# USB interface directory in sysfs, e.g. 1-1.2:1.0 (bus-port.port:config.interface)
_USB_INTERFACE = re.compile(r"^\d+-\d+(?:\.\d+)*:\d+\.\d+$")


def udevadm_decode(raw: str) -> str:
    r"""Decode embedded hex escapes, e.g. ``hello\x20world`` -> ``hello world``."""
    return _HEX_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), raw)


def parse_udev_properties(text: str) -> Dict[str, str]:
    """Parse ``udevadm info -q property --export`` output into a dict.

    Lines that are not ``KEY='VALUE'`` pairs are ignored.
    """
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        m = _UDEV_PROPERTY.match(line.strip())
        if m:
            fields[m.group(1)] = m.group(2)
    return fields


def usb_interface_from_devpath(devpath: str) -> Optional[str]:
    """Return the USB interface name from a udev DEVPATH, or None.

    ``/devices/pci0000:00/.../usb1/1-1/1-1:1.0/ttyUSB0/tty/ttyUSB0`` -> ``1-1:1.0``.
    This is the value pyserial reports as ``location``.
    """
    found = None
    for part in devpath.split("/"):
        if _USB_INTERFACE.match(part):
            found = part
    return found


class PyserialAttributeSource(AttributeSourceInterface):
    """
    Attribute source backed by pyserial's ``list_ports``.

    On Linux pyserial reads sysfs directly, so this needs neither udev
    nor elevated privileges. Non-USB ports (no VID/PID) are skipped.
    """

    def list_devices(self) -> List[Dict[str, str]]:
        try:
            ports = serial.tools.list_ports.comports()
        except OSError as e:
            raise EnumerationError(f"Could not list serial ports: {e}") from e

        devices: List[Dict[str, str]] = []
        for p in ports:
            if p.vid is None or p.pid is None:
                logger.debug("Skipping %s: not a USB device", p.device)
                continue
            props = {
                "DEVNAME": p.device,
                "ID_BUS": "usb",
                "ID_VENDOR_ID": f"{p.vid:04x}",
                "ID_MODEL_ID": f"{p.pid:04x}",
            }
            optional = {
                "ID_SERIAL_SHORT": p.serial_number,
                "ID_PATH": p.location,
                "ID_VENDOR_ENC": p.manufacturer,
                "ID_MODEL_ENC": p.product,
            }
            props.update({k: v for k, v in optional.items() if v})
            devices.append(props)
        return devices


class UdevadmAttributeSource(AttributeSourceInterface):
    """
    Attribute source that asks udev about each tty in ``/sys/class/tty``.

    Only ttys backed by a driver are considered (virtual consoles have no
    ``device/driver`` link), and only those udev reports on the USB bus.
    """

    def __init__(self, sys_class_tty: str = "/sys/class/tty",
                 udevadm: str = "udevadm", timeout: float = 10.0):
        self._sys_class_tty = sys_class_tty
        self._udevadm = udevadm
        self._timeout = timeout

    def _tty_dirs(self) -> List[str]:
        # /sys/class/tty/ttyUSB0/device/driver -> /sys/class/tty/ttyUSB0
        pattern = os.path.join(self._sys_class_tty, "*", "device", "driver")
        return sorted(os.path.dirname(os.path.dirname(p)) for p in glob.glob(pattern))

    def _query(self, sys_path: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self._udevadm, "info", "-q", "property", "--export", "-p", sys_path],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise EnumerationError(f"{self._udevadm} not found; is udev installed?") from e
        except (PermissionError, subprocess.TimeoutExpired) as e:
            raise EnumerationError(f"Failed to execute {self._udevadm}: {e}") from e

    def list_devices(self) -> List[Dict[str, str]]:
        devices: List[Dict[str, str]] = []
        queried = 0
        failed = 0
        last_error = ""
        for sys_path in self._tty_dirs():
            queried += 1
            result = self._query(sys_path)
            if result.returncode != 0:
                # A single node can disappear between the glob and the query.
                failed += 1
                last_error = result.stderr.strip()
                logger.debug("udevadm failed for %s: %s", sys_path, last_error)
                continue
            fields = parse_udev_properties(result.stdout)
            if fields.get("ID_BUS") != "usb":
                logger.debug("Skipping %s: not on the USB bus", sys_path)
                continue
            for key in ("ID_VENDOR_ENC", "ID_MODEL_ENC"):
                if key in fields:
                    fields[key] = udevadm_decode(fields[key])
            # Report the bus path in pyserial's format so bindings work with either source.
            interface = usb_interface_from_devpath(fields.get("DEVPATH", ""))
            if interface:
                fields["ID_PATH"] = interface
            else:
                fields.pop("ID_PATH", None)
            devices.append(fields)

        if queried and failed == queried:
            raise EnumerationError(
                f"udevadm failed for all {queried} tty device(s): {last_error or 'no error output'}"
            )
        return devices


SOURCES = {
    "pyserial": PyserialAttributeSource,
    "udevadm": UdevadmAttributeSource,
}


def get_attribute_source(name: str) -> AttributeSourceInterface:
    """Instantiate an attribute source by name ('pyserial' or 'udevadm')."""
    try:
        return SOURCES[name]()
    except KeyError:
        raise ValueError(f"Unknown attribute source {name!r} (choose from {', '.join(SOURCES)})") from None
