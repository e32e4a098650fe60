"""Shared pytest configuration for ttynamed tests."""

from __future__ import annotations

import pytest

from ttynamed.binder import Binder
from ttynamed.enumerator import DeviceEnumerator
from ttynamed.mocks import MockAttributeSource, MockCriteriaStore
from ttynamed.resolver import Resolver


def pytest_addoption(parser):
    parser.addoption(
        "--hw",
        action="store_true",
        default=False,
        help="Run hardware tests (enumerate the real serial ports of this machine)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "hardware: needs real USB serial hardware (run with --hw)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--hw"):
        return
    skip_hw = pytest.mark.skip(reason="needs --hw")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hw)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Keep tests away from the user's real bindings file."""
    monkeypatch.delenv("TTYNAMED_SOURCE", raising=False)
    monkeypatch.setenv("TTYNAMED_CONFIG", str(tmp_path / "ttys.json"))


@pytest.fixture
def source():
    return MockAttributeSource()


@pytest.fixture
def store():
    return MockCriteriaStore()


@pytest.fixture
def enumerator(source):
    return DeviceEnumerator(source)


@pytest.fixture
def binder(enumerator, store):
    return Binder(enumerator, store)


@pytest.fixture
def resolver(enumerator, store):
    return Resolver(enumerator, store)
