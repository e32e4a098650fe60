"""Binding commands: resolve, bind, delete, show, list."""

from __future__ import annotations

import sys
import warnings

from ttynamed.binder import Binder
from ttynamed.enumerator import DeviceEnumerator
from ttynamed.errors import DegradedBindingWarning, NameNotBoundError
from ttynamed.interfaces import AttributeSourceInterface, CriteriaStoreInterface, normalize_name
from ttynamed.resolver import Resolver
from ttynamed.cli.helpers import _none, _now_iso, _print


def cmd_resolve(*, name: str, source: AttributeSourceInterface,
                store: CriteriaStoreInterface, json_mode: bool) -> int:
    """Print the current device path for a friendly name.

    Returns:
        Exit code: 0 on success. Errors propagate as TtyNamedError.
    """
    name = normalize_name(name)
    device = Resolver(DeviceEnumerator(source), store).resolve(name)
    if json_mode:
        _print({"schema_version": 1, "name": name, "device": device}, json_mode=True)
    else:
        print(device)
    return 0


def cmd_bind(*, name: str, device: str, by_port: bool, source: AttributeSourceInterface,
             store: CriteriaStoreInterface, json_mode: bool) -> int:
    """Bind a friendly name to the device currently at *device*.

    A serial-less device still binds (exit 0) but gets a port-dependence
    warning.
    """
    binder = Binder(DeviceEnumerator(source), store)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", DegradedBindingWarning)
        binding = binder.bind(name, device, include_bus_path=by_port)
    degraded = [str(w.message) for w in caught if issubclass(w.category, DegradedBindingWarning)]

    if json_mode:
        payload = {
            "schema_version": 1,
            "timestamp": _now_iso(),
            "bound": True,
            "name": binding.name,
            "device": device,
            "criteria": binding.to_dict(),
            "degraded": binding.degraded,
        }
        if degraded:
            payload["warning"] = degraded[0]
        _print(payload, json_mode=True)
    else:
        for msg in degraded:
            print(f"Warning: {msg}", file=sys.stderr)
        print(f"{binding.name} -> {device}")
    return 0


def cmd_delete(*, name: str, store: CriteriaStoreInterface, json_mode: bool) -> int:
    """Remove a binding.

    Returns:
        Exit code: 0 if removed. Raises NameNotBoundError if it wasn't bound.
    """
    name = normalize_name(name)
    if not store.delete(name):
        raise NameNotBoundError(name)
    if json_mode:
        _print({"schema_version": 1, "timestamp": _now_iso(), "removed": True, "name": name},
               json_mode=True)
    else:
        print(f"{name} was removed successfully!")
    return 0


def cmd_show(*, name: str, store: CriteriaStoreInterface, json_mode: bool) -> int:
    """Show the stored criteria for one name."""
    name = normalize_name(name)
    binding = store.get(name)
    if binding is None:
        raise NameNotBoundError(name)
    if json_mode:
        _print({"schema_version": 1, "name": name, "criteria": binding.to_dict(),
                "degraded": binding.degraded}, json_mode=True)
    else:
        for key, value in binding.criteria.items():
            print(f"{key}\t{value}")
    return 0


def cmd_list(*, source: AttributeSourceInterface, store: CriteriaStoreInterface,
             json_mode: bool) -> int:
    """List attached devices with their bound names, then bound names not present.

    Text output is tab separated: name, device, manufacturer, product, serial.
    Rows for missing names show the stored vendor and product IDs instead.
    """
    survey = Resolver(DeviceEnumerator(source), store).survey()

    if json_mode:
        payload = {
            "schema_version": 1,
            "timestamp": _now_iso(),
            "devices": [
                dict(p.device.to_dict(), names=p.names) for p in survey.present
            ],
            "missing": [
                {"name": b.name, "criteria": b.to_dict()} for b in survey.missing
            ],
            "ambiguous": survey.ambiguous,
        }
        _print(payload, json_mode=True)
        return 0

    for p in survey.present:
        d = p.device
        columns = [d.device_path, _none(d.manufacturer), _none(d.product), _none(d.serial_number)]
        for name in p.names or [""]:
            print("\t".join([name] + columns))

    for b in survey.missing:
        print("\t".join([b.name, "(Not present)", _none(b.criteria.get("vendor_id")),
                         _none(b.criteria.get("product_id")), _none(b.criteria.get("serial_number"))]))

    for name, devices in sorted(survey.ambiguous.items()):
        print(f"Warning: {name} matches {len(devices)} devices: {', '.join(devices)}", file=sys.stderr)
    return 0
