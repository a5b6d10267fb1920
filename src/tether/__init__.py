"""tether: attach named properties to any object at runtime."""

from importlib.metadata import version as _version

__version__ = _version("tether")

from tether.errors import (
    ConnectedPropertyError,
    InvalidCarrierKindError,
    AlreadyConnectedError,
    NotConnectedError,
)
from tether.property import ConnectedProperty
from tether.scope import PropertyScope, default_scope
from tether.shortcuts import get_property, get_value, set_value, copy_all, try_copy_all

__all__ = [
    "ConnectedProperty",
    "PropertyScope",
    "default_scope",
    "get_property",
    "get_value",
    "set_value",
    "copy_all",
    "try_copy_all",
    "ConnectedPropertyError",
    "InvalidCarrierKindError",
    "AlreadyConnectedError",
    "NotConnectedError",
]
