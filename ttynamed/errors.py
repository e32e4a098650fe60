"""Error taxonomy for ttynamed.

Each error carries the process exit code the CLI reports for it, so a caller
can tell "device unplugged" apart from "name never bound" without parsing
stderr.
"""

from __future__ import annotations

from typing import Sequence


class TtyNamedError(Exception):
    """Base class for all ttynamed errors."""
    exit_code = 1


class EnumerationError(TtyNamedError):
    """The OS device database could not be queried at all."""
    exit_code = 3


class DeviceNotFoundError(TtyNamedError):
    """A device path given to bind is not a currently attached USB serial device."""
    exit_code = 4

    def __init__(self, device_path: str) -> None:
        super().__init__(
            f"{device_path} doesn't seem to be a connected USB serial device. "
            f"Check the path, replug the device and retry."
        )
        self.device_path = device_path


class NameNotBoundError(TtyNamedError):
    """No binding is stored for the requested friendly name."""
    exit_code = 5

    def __init__(self, name: str) -> None:
        super().__init__(
            f"{name} isn't a known friendly name. "
            f"Bind it first: ttynamed bind <device> {name}"
        )
        self.name = name


class DeviceNotPresentError(TtyNamedError):
    """A binding exists but no attached device matches it."""
    exit_code = 6

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} doesn't appear to be present")
        self.name = name


class AmbiguousMatchError(TtyNamedError):
    """More than one attached device matches the stored criteria."""
    exit_code = 7

    def __init__(self, name: str, candidates: Sequence[str]) -> None:
        self.name = name
        self.candidates = list(candidates)
        super().__init__(
            f"Found multiple devices that could be {name}: {', '.join(self.candidates)}. "
            f"Rebind with --by-port to tell them apart."
        )


class UnidentifiableDeviceError(TtyNamedError):
    """The device exposes none of the attributes a binding could match on."""

    def __init__(self, device_path: str) -> None:
        super().__init__(f"{device_path} reports no vendor, product, serial or bus path to bind on")
        self.device_path = device_path


class CriteriaStoreError(TtyNamedError):
    """The bindings file could not be read, parsed or written."""


class DegradedBindingWarning(UserWarning):
    """A binding was created without a serial number and depends on the USB port."""
