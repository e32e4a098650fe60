"""Tests for ttynamed/attribute_sources.py — pyserial and udevadm sources."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from ttynamed.attribute_sources import (
    PyserialAttributeSource,
    UdevadmAttributeSource,
    get_attribute_source,
    parse_udev_properties,
    udevadm_decode,
    usb_interface_from_devpath,
)
from ttynamed.binder import Binder
from ttynamed.enumerator import DeviceEnumerator
from ttynamed.errors import DegradedBindingWarning, EnumerationError
from ttynamed.mocks import MockCriteriaStore
from ttynamed.resolver import Resolver


def _port(device, vid=None, pid=None, serial_number=None, location=None,
          manufacturer=None, product=None):
    return SimpleNamespace(device=device, vid=vid, pid=pid, serial_number=serial_number,
                           location=location, manufacturer=manufacturer, product=product)


UDEV_CP2102 = """\
DEVPATH='/devices/pci0000:00/0000:00:14.0/usb1/1-1/1-1:1.0/ttyUSB0/tty/ttyUSB0'
DEVNAME='/dev/ttyUSB0'
MAJOR='188'
ID_BUS='usb'
ID_VENDOR_ID='10c4'
ID_MODEL_ID='ea60'
ID_SERIAL_SHORT='A1B2C3'
ID_VENDOR_ENC='Silicon\\x20Labs'
ID_MODEL_ENC='CP2102\\x20USB\\x20to\\x20UART\\x20Bridge\\x20Controller'
ID_PATH='pci-0000:00:14.0-usb-0:1:1.0'
"""

UDEV_SERIAL8250 = """\
DEVNAME='/dev/ttyS0'
MAJOR='4'
"""


class TestUdevadmDecode:
    def test_space(self):
        assert udevadm_decode(r"hello\x20world") == "hello world"

    def test_plain(self):
        assert udevadm_decode("FT232R") == "FT232R"

    def test_multiple(self):
        assert udevadm_decode(r"a\x2fb\x2Fc") == "a/b/c"


class TestParseUdevProperties:
    def test_parses_pairs(self):
        fields = parse_udev_properties(UDEV_CP2102)
        assert fields["DEVNAME"] == "/dev/ttyUSB0"
        assert fields["ID_SERIAL_SHORT"] == "A1B2C3"

    def test_ignores_junk(self):
        assert parse_udev_properties("garbage\nKEY=unquoted\n\nA='b'\n") == {"A": "b"}


class TestPyserialSource:
    def test_maps_usb_port(self):
        ports = [_port("/dev/ttyUSB0", vid=0x10C4, pid=0xEA60, serial_number="A1B2C3",
                       location="1-1:1.0", manufacturer="Silicon Labs", product="CP2102")]
        with patch("serial.tools.list_ports.comports", return_value=ports):
            devices = PyserialAttributeSource().list_devices()
        assert devices == [{
            "DEVNAME": "/dev/ttyUSB0",
            "ID_BUS": "usb",
            "ID_VENDOR_ID": "10c4",
            "ID_MODEL_ID": "ea60",
            "ID_SERIAL_SHORT": "A1B2C3",
            "ID_PATH": "1-1:1.0",
            "ID_VENDOR_ENC": "Silicon Labs",
            "ID_MODEL_ENC": "CP2102",
        }]

    def test_skips_non_usb(self):
        with patch("serial.tools.list_ports.comports", return_value=[_port("/dev/ttyS0")]):
            assert PyserialAttributeSource().list_devices() == []

    def test_missing_serial_omitted(self):
        ports = [_port("/dev/ttyACM0", vid=0x2341, pid=0x43, location="1-2:1.0")]
        with patch("serial.tools.list_ports.comports", return_value=ports):
            (props,) = PyserialAttributeSource().list_devices()
        assert "ID_SERIAL_SHORT" not in props
        assert props["ID_MODEL_ID"] == "0043"

    def test_os_error(self):
        with patch("serial.tools.list_ports.comports", side_effect=PermissionError("denied")):
            with pytest.raises(EnumerationError, match="denied"):
                PyserialAttributeSource().list_devices()


@pytest.fixture
def sys_class_tty(tmp_path):
    root = tmp_path / "tty"
    (root / "ttyUSB0" / "device" / "driver").mkdir(parents=True)
    (root / "ttyS0" / "device" / "driver").mkdir(parents=True)
    (root / "tty0").mkdir(parents=True)  # virtual console: no driver
    return root


def _fake_udevadm(outputs):
    def run(cmd, **kwargs):
        sys_path = cmd[-1]
        name = sys_path.rsplit("/", 1)[-1]
        if name not in outputs:
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="Unknown device")
        return subprocess.CompletedProcess(cmd, 0, stdout=outputs[name], stderr="")
    return run


class TestUdevadmSource:
    def test_usb_only(self, sys_class_tty):
        run = _fake_udevadm({"ttyUSB0": UDEV_CP2102, "ttyS0": UDEV_SERIAL8250})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run) as mock_run:
            devices = UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()
        assert [d["DEVNAME"] for d in devices] == ["/dev/ttyUSB0"]
        # tty0 has no driver link, so it is never queried
        queried = [c.args[0][-1] for c in mock_run.call_args_list]
        assert not any(p.endswith("tty0") for p in queried)

    def test_decodes_encoded_fields(self, sys_class_tty):
        run = _fake_udevadm({"ttyUSB0": UDEV_CP2102})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            (props,) = UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()
        assert props["ID_VENDOR_ENC"] == "Silicon Labs"
        assert props["ID_MODEL_ENC"] == "CP2102 USB to UART Bridge Controller"

    def test_vanished_node_skipped(self, sys_class_tty):
        # ttyS0 fails, ttyUSB0 still answers
        run = _fake_udevadm({"ttyUSB0": UDEV_CP2102})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            devices = UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()
        assert [d["DEVNAME"] for d in devices] == ["/dev/ttyUSB0"]

    def test_all_nodes_fail_raises(self, sys_class_tty):
        def run(cmd, **kwargs):
            return subprocess.CompletedProcess(
                cmd, 1, stdout="", stderr="Failed to open /run/udev: Permission denied")
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            with pytest.raises(EnumerationError, match="Permission denied"):
                UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()

    def test_only_encoded_fields_decoded(self, sys_class_tty):
        output = UDEV_CP2102.replace("ID_SERIAL_SHORT='A1B2C3'", "ID_SERIAL_SHORT='AB\\x41'")
        run = _fake_udevadm({"ttyUSB0": output})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            (props,) = UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()
        assert props["ID_SERIAL_SHORT"] == "AB\\x41"
        assert props["ID_VENDOR_ENC"] == "Silicon Labs"

    def test_bus_path_uses_usb_interface(self, sys_class_tty):
        run = _fake_udevadm({"ttyUSB0": UDEV_CP2102})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            (props,) = UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()
        assert props["ID_PATH"] == "1-1:1.0"

    def test_bus_path_dropped_without_usb_interface(self, sys_class_tty):
        output = UDEV_CP2102.replace(
            "/usb1/1-1/1-1:1.0/ttyUSB0/tty/ttyUSB0", "/virtual/tty/ttyUSB0")
        run = _fake_udevadm({"ttyUSB0": output})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            (props,) = UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()
        assert "ID_PATH" not in props

    def test_no_ttys(self, tmp_path):
        assert UdevadmAttributeSource(sys_class_tty=str(tmp_path / "nope")).list_devices() == []

    def test_missing_binary(self, sys_class_tty):
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(EnumerationError, match="not found"):
                UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()

    def test_timeout(self, sys_class_tty):
        with patch("ttynamed.attribute_sources.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(["udevadm"], 10)):
            with pytest.raises(EnumerationError):
                UdevadmAttributeSource(sys_class_tty=str(sys_class_tty)).list_devices()

    def test_feeds_enumerator(self, sys_class_tty):
        run = _fake_udevadm({"ttyUSB0": UDEV_CP2102})
        with patch("ttynamed.attribute_sources.subprocess.run", side_effect=run):
            (dev,) = DeviceEnumerator(UdevadmAttributeSource(sys_class_tty=str(sys_class_tty))).enumerate()
        assert dev.device_path == "/dev/ttyUSB0"
        assert dev.serial_number == "A1B2C3"
        assert dev.bus_path == "1-1:1.0"


class TestUsbInterfaceFromDevpath:
    def test_usb_serial(self):
        devpath = "/devices/pci0000:00/0000:00:14.0/usb1/1-1/1-1:1.0/ttyUSB0/tty/ttyUSB0"
        assert usb_interface_from_devpath(devpath) == "1-1:1.0"

    def test_acm_behind_hub(self):
        devpath = "/devices/pci0000:00/0000:00:14.0/usb1/1-2/1-2.3/1-2.3:1.0/tty/ttyACM0"
        assert usb_interface_from_devpath(devpath) == "1-2.3:1.0"

    def test_not_usb(self):
        assert usb_interface_from_devpath("/devices/platform/serial8250/tty/ttyS0") is None
        assert usb_interface_from_devpath("") is None


UDEV_UNO = """\
DEVPATH='/devices/pci0000:00/0000:00:14.0/usb1/1-2/1-2:1.0/tty/ttyACM1'
DEVNAME='/dev/ttyACM1'
ID_BUS='usb'
ID_VENDOR_ID='2341'
ID_MODEL_ID='0043'
ID_PATH='pci-0000:00:14.0-usb-0:2:1.0'
"""


class TestSourcesAgree:
    def test_bind_with_pyserial_resolve_with_udevadm(self, tmp_path):
        store = MockCriteriaStore()
        ports = [_port("/dev/ttyACM0", vid=0x2341, pid=0x43, location="1-2:1.0")]
        with patch("serial.tools.list_ports.comports", return_value=ports):
            with pytest.warns(DegradedBindingWarning):
                Binder(DeviceEnumerator(PyserialAttributeSource()), store).bind("uno", "/dev/ttyACM0")
        assert store.get("uno").criteria["bus_path"] == "1-2:1.0"

        root = tmp_path / "tty"
        (root / "ttyACM1" / "device" / "driver").mkdir(parents=True)
        udevadm = UdevadmAttributeSource(sys_class_tty=str(root))
        with patch("ttynamed.attribute_sources.subprocess.run",
                   side_effect=_fake_udevadm({"ttyACM1": UDEV_UNO})):
            assert Resolver(DeviceEnumerator(udevadm), store).resolve("uno") == "/dev/ttyACM1"


class TestGetAttributeSource:
    def test_known(self):
        assert isinstance(get_attribute_source("pyserial"), PyserialAttributeSource)
        assert isinstance(get_attribute_source("udevadm"), UdevadmAttributeSource)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown attribute source"):
            get_attribute_source("hal")
