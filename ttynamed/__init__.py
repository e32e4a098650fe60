"""
ttynamed - find USB serial devices by friendly name.

Binds a name to a device's vendor ID, product ID and serial number (or
USB port, when there is no serial), then finds whichever /dev node the
device was given after the latest replug.
"""

__version__ = "0.2.0"

from .interfaces import (
    CRITERIA_FIELDS,
    AttributeSourceInterface,
    Binding,
    CriteriaStoreInterface,
    DeviceAttributes,
)
from .errors import (
    AmbiguousMatchError,
    CriteriaStoreError,
    DegradedBindingWarning,
    DeviceNotFoundError,
    DeviceNotPresentError,
    EnumerationError,
    NameNotBoundError,
    TtyNamedError,
    UnidentifiableDeviceError,
)
from .attribute_sources import PyserialAttributeSource, UdevadmAttributeSource
from .enumerator import DeviceEnumerator
from .criteria_store import JsonCriteriaStore
from .binder import Binder
from .resolver import Resolver

__all__ = [
    "CRITERIA_FIELDS",
    "AttributeSourceInterface",
    "Binding",
    "CriteriaStoreInterface",
    "DeviceAttributes",
    "AmbiguousMatchError",
    "CriteriaStoreError",
    "DegradedBindingWarning",
    "DeviceNotFoundError",
    "DeviceNotPresentError",
    "EnumerationError",
    "NameNotBoundError",
    "TtyNamedError",
    "UnidentifiableDeviceError",
    "PyserialAttributeSource",
    "UdevadmAttributeSource",
    "DeviceEnumerator",
    "JsonCriteriaStore",
    "Binder",
    "Resolver",
]
