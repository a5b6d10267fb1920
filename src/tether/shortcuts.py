"""One-line helpers over the default scope.

Usage:
    widget = Widget()
    set_value(widget, "owner", "Bob")
    get_value(widget, "owner")  # "Bob"
"""

from __future__ import annotations

from tether.property import ConnectedProperty
from tether.scope import default_scope


def get_property(carrier: object, name: str, *, bypass_validation: bool = False) -> ConnectedProperty:
    return default_scope().get_property(carrier, name, bypass_validation=bypass_validation)


def get_value(carrier: object, name: str) -> object:
    """Read a default-scope property; raises NotConnectedError if disconnected."""
    return get_property(carrier, name).get()


def set_value(carrier: object, name: str, value: object) -> None:
    get_property(carrier, name).set(value)


def copy_all(from_carrier: object, to_carrier: object) -> None:
    default_scope().copy_all(from_carrier, to_carrier)


def try_copy_all(from_carrier: object, to_carrier: object) -> bool:
    return default_scope().try_copy_all(from_carrier, to_carrier)
