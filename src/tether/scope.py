"""PropertyScope — an isolated space of carrier -> properties attachments.

Each scope owns one WeakAttachmentTable, so the same property name on the
same carrier is independent across scopes. A scope lives as long as anything
references it, including property values attached through it.

The default scope is created on first use and lives for the whole process.
"""

from __future__ import annotations

import logging
import threading

from tether import _eligibility
from tether._attributes import AttributeMap
from tether._table import WeakAttachmentTable
from tether.errors import InvalidCarrierKindError
from tether.property import ConnectedProperty

logger = logging.getLogger("tether.scope")


class PropertyScope:
    """A collection of properties that can be connected to carrier objects."""

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._table = WeakAttachmentTable(repr(self))

    @property
    def name(self) -> str | None:
        return self._name

    def get_property(
        self, carrier: object, name: str, *, bypass_validation: bool = False
    ) -> ConnectedProperty:
        """Handle on carrier's property `name`.

        Raises InvalidCarrierKindError if carrier's type redefines equality or
        cannot be weakly attached to. bypass_validation=True skips the check;
        that is unsafe, since equal carriers may then share properties.
        """
        if not bypass_validation:
            self._verify(carrier)
        return ConnectedProperty(self._attributes(carrier, bypass_validation), name)

    def try_get_property(
        self, carrier: object, name: str, *, bypass_validation: bool = False
    ) -> ConnectedProperty | None:
        """Like get_property, but returns None for an invalid carrier."""
        if not bypass_validation and not _eligibility.check(carrier):
            return None
        return ConnectedProperty(self._attributes(carrier, bypass_validation), name)

    def copy_all(
        self, from_carrier: object, to_carrier: object, *, bypass_validation: bool = False
    ) -> None:
        """Copy every connected property from one carrier onto another.

        Existing destination values with the same names are overwritten;
        names only the destination has are left alone. The copy is a
        snapshot taken while iterating, not a transaction.
        """
        if not bypass_validation:
            self._verify(from_carrier)
            self._verify(to_carrier)
        self._copy(from_carrier, to_carrier, bypass_validation)

    def try_copy_all(
        self, from_carrier: object, to_carrier: object, *, bypass_validation: bool = False
    ) -> bool:
        """Like copy_all, but returns False instead of raising for invalid carriers."""
        if not bypass_validation and not (
            _eligibility.check(from_carrier) and _eligibility.check(to_carrier)
        ):
            return False
        self._copy(from_carrier, to_carrier, bypass_validation)
        return True

    def snapshot(self, carrier: object, *, bypass_validation: bool = False) -> dict[str, object]:
        """Point-in-time copy of carrier's connected properties in this scope."""
        if not bypass_validation:
            self._verify(carrier)
        attributes = self._table.find(carrier)
        return dict(attributes.snapshot()) if attributes is not None else {}

    def _copy(self, from_carrier: object, to_carrier: object, bypass_validation: bool) -> None:
        source = self._attributes(from_carrier, bypass_validation)
        destination = self._attributes(to_carrier, bypass_validation)
        entries = source.snapshot()
        for name, value in entries:
            destination.set(name, value)
        logger.debug(
            "Copied %d properties from %s to %s in %r",
            len(entries), type(from_carrier).__qualname__, type(to_carrier).__qualname__, self,
        )

    def _attributes(self, carrier: object, bypass_validation: bool) -> AttributeMap:
        if bypass_validation and not _eligibility.check(carrier):
            logger.debug(
                "Bypassing validation for %s carrier in %r", type(carrier).__qualname__, self
            )
        return self._table.get_or_create(carrier)

    @staticmethod
    def _verify(carrier: object) -> None:
        if not _eligibility.check(carrier):
            raise InvalidCarrierKindError(type(carrier))

    def __repr__(self) -> str:
        if self._name is None:
            return f"PropertyScope(<anonymous at {id(self):#x}>)"
        return f"PropertyScope({self._name!r})"


_default: PropertyScope | None = None
_default_lock = threading.Lock()


def default_scope() -> PropertyScope:
    """The process-wide default scope. Created once, never torn down."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = PropertyScope("default")
    return _default
