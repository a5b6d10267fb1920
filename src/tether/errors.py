"""Errors raised by connected properties.

Every failure is local to the call that raised it: the attribute map is left
exactly as it was before the call.
"""

from __future__ import annotations


class ConnectedPropertyError(Exception):
    """Base class for all tether errors."""


class InvalidCarrierKindError(ConnectedPropertyError, TypeError):
    """The carrier's type may not have connected properties."""

    def __init__(self, carrier_type: type) -> None:
        self.carrier_type = carrier_type
        super().__init__(
            f'Object of type "{carrier_type.__qualname__}" may not have connected properties. '
            "Only weak-referenceable types that use identity equality may have connected properties."
        )


class AlreadyConnectedError(ConnectedPropertyError, RuntimeError):
    """connect() was called on a property that is already connected."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Connected property {name!r} was already connected.")


class NotConnectedError(ConnectedPropertyError, LookupError):
    """get() or disconnect() was called on a disconnected property."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Connected property {name!r} is disconnected.")
