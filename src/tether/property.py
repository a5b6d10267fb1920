"""ConnectedProperty — a handle on one named property of one carrier.

A handle is just (attribute map, name). It never references the carrier or
the scope, and any number of handles for the same property are
interchangeable. A property is either connected (has a value, possibly None)
or disconnected (absent).

All operations are thread-safe. The callback-taking ones may invoke their
callbacks more than once under contention; only one result is ever kept.
"""

from __future__ import annotations

from typing import Callable

from tether._attributes import AttributeMap
from tether.errors import AlreadyConnectedError, NotConnectedError


class ConnectedProperty:
    """A property that may be connected to a carrier object at runtime."""

    __slots__ = ("_attributes", "_name")

    def __init__(self, attributes: AttributeMap, name: str) -> None:
        self._attributes = attributes
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def try_connect(self, value: object) -> bool:
        """Set the value only if disconnected. True if this call connected it."""
        return self._attributes.try_add(self._name, value)

    def try_disconnect(self) -> bool:
        """Disconnect the property. True if this call did the disconnecting."""
        return self._attributes.try_remove(self._name)

    def try_get(self) -> tuple[bool, object]:
        """(True, value) if connected, (False, None) if disconnected."""
        return self._attributes.try_get(self._name)

    def try_update(self, new_value: object, expected: object) -> bool:
        """Replace the value if it currently equals expected (==, not identity)."""
        return self._attributes.try_update(self._name, new_value, expected)

    def get_or_create(self, factory: Callable[[], object]) -> object:
        """Return the value, connecting factory() first if disconnected.

        If several threads race, each factory may run but every caller
        receives the single value that was kept.
        """
        return self._attributes.get_or_add(self._name, factory)

    def create_or_update(
        self,
        factory: Callable[[], object],
        updater: Callable[[object], object],
    ) -> object:
        """Connect factory() or replace the value with updater(value).

        Retries until it wins, so both callbacks may run more than once and
        must not rely on side effects. Returns the value that was stored.
        """
        return self._attributes.add_or_update(self._name, factory, updater)

    def get_or_connect(self, value: object) -> object:
        return self.get_or_create(lambda: value)

    def connect_or_update(self, value: object, updater: Callable[[object], object]) -> object:
        return self.create_or_update(lambda: value, updater)

    def connect(self, value: object) -> None:
        """Connect the property, raising AlreadyConnectedError if it was connected."""
        if not self.try_connect(value):
            raise AlreadyConnectedError(self._name)

    def disconnect(self) -> None:
        """Disconnect the property, raising NotConnectedError if it was not connected."""
        if not self.try_disconnect():
            raise NotConnectedError(self._name)

    def get(self) -> object:
        """Read the value, raising NotConnectedError if disconnected."""
        connected, value = self.try_get()
        if not connected:
            raise NotConnectedError(self._name)
        return value

    def set(self, value: object) -> None:
        """Connect or overwrite. Never fails."""
        self._attributes.set(self._name, value)

    def __repr__(self) -> str:
        connected, value = self.try_get()
        state = f"value={value!r}" if connected else "disconnected"
        return f"ConnectedProperty({self._name!r}, {state})"
