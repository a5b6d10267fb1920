"""Weak attachment table — carrier identity -> AttributeMap for one scope.

CPython has no ephemeron, so the table picks a storage tier per carrier:

1. Namespace. Carriers with an instance __dict__ hold their own attachments
   under NAMESPACE_ATTRIBUTE: a weak-keyed dict from table to AttributeMap.
   The table never references the carrier, so a value that points back at
   its carrier (or at another carrier whose value points back) is an ordinary
   reference cycle and the cyclic collector reclaims it as a unit. Dropping
   the table drops its entry from every carrier.
2. Weak index. Carriers without a __dict__ that support weak references are
   keyed by id() in a dict owned by the table, next to a weakref whose
   callback evicts the entry. The carrier's own __hash__ and __eq__ are never
   consulted. A value that strongly references its own carrier keeps that
   carrier alive for as long as the table lives.
3. Pinned index. Anything else (only reachable with validation bypassed) is
   held strongly for the life of the table. Equal values share one entry.

Removal timing belongs to the garbage collector.
"""

from __future__ import annotations

import logging
import threading
import weakref

from tether._attributes import AttributeMap

logger = logging.getLogger("tether.table")

NAMESPACE_ATTRIBUTE = "_tether_attachments"

# Guards only the rare reset of a namespace entry copied from another carrier.
_reset_lock = threading.Lock()


class _Attachments(weakref.WeakKeyDictionary):
    """A carrier's own table -> AttributeMap entries.

    Remembers which carrier it was created for. copy.copy() shares it and
    pickling/deepcopy recreate it empty; either way the owner id no longer
    matches and the table replaces it with a fresh one.
    """

    def __init__(self, owner_id: int | None = None) -> None:
        super().__init__()
        self.owner_id = owner_id

    def __reduce__(self):
        return (_Attachments, ())

    def __copy__(self):
        return _Attachments()

    def __deepcopy__(self, memo):
        return _Attachments()


class _PinnedKey:
    """Identity key for an unhashable pinned carrier. Holds it strongly."""

    __slots__ = ("target",)

    def __init__(self, target: object) -> None:
        self.target = target

    def __hash__(self) -> int:
        return id(self.target)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _PinnedKey) and other.target is self.target


def _instance_namespace(carrier: object) -> dict | None:
    try:
        namespace = object.__getattribute__(carrier, "__dict__")
    except AttributeError:
        return None
    # Classes expose a read-only mappingproxy here.
    return namespace if type(namespace) is dict else None


def _weakly_indexable(carrier: object) -> bool:
    return bool(type(carrier).__weakrefoffset__)


def _evictor(table_ref: weakref.ref, key: int):
    """Weakref callback that drops a dead carrier's weak-index entry.

    Holds the table weakly so a live carrier never keeps its table alive.
    """

    def evict(carrier_ref: weakref.ref) -> None:
        table = table_ref()
        if table is not None:
            table._evict(key, carrier_ref)

    return evict


def _pinned_key(carrier: object) -> object:
    return carrier if type(carrier).__hash__ is not None else _PinnedKey(carrier)


class WeakAttachmentTable:
    """Identity-keyed mapping from carrier to its AttributeMap."""

    def __init__(self, label: str = "anonymous") -> None:
        self._label = label
        # id(carrier) -> (weakref to carrier, its attributes)
        self._weak: dict[int, tuple[weakref.ref, AttributeMap]] = {}
        self._weak_lock = threading.RLock()
        self._pinned: dict[object, AttributeMap] = {}

    def get_or_create(self, carrier: object) -> AttributeMap:
        """Return carrier's map, creating it on first access.

        Concurrent first accesses converge on a single map; losing maps are
        dropped before anyone sees them.
        """
        namespace = _instance_namespace(carrier)
        if namespace is not None:
            return self._from_namespace(carrier, namespace)
        if _weakly_indexable(carrier):
            return self._from_weak_index(carrier)
        return self._from_pinned(carrier)

    def find(self, carrier: object) -> AttributeMap | None:
        """Return carrier's map if it has one, without creating it."""
        namespace = _instance_namespace(carrier)
        if namespace is not None:
            attachments = namespace.get(NAMESPACE_ATTRIBUTE)
            if not isinstance(attachments, _Attachments) or attachments.owner_id != id(carrier):
                return None
            return attachments.get(self)
        if _weakly_indexable(carrier):
            entry = self._weak.get(id(carrier))
            if entry is None or entry[0]() is not carrier:
                return None
            return entry[1]
        return self._pinned.get(_pinned_key(carrier))

    def _from_weak_index(self, carrier: object) -> AttributeMap:
        key = id(carrier)
        entry = self._weak.get(key)
        if entry is not None and entry[0]() is carrier:
            return entry[1]
        candidate = AttributeMap()
        carrier_ref = weakref.ref(carrier, _evictor(weakref.ref(self), key))
        with self._weak_lock:
            entry = self._weak.get(key)
            if entry is not None and entry[0]() is carrier:
                return entry[1]
            # A dead entry for a recycled id is displaced here; `entry` keeps
            # it alive until the lock is released.
            self._weak[key] = (carrier_ref, candidate)
        logger.debug(
            "Created weak-index attributes for %s in %s", type(carrier).__qualname__, self._label
        )
        return candidate

    def _evict(self, key: int, carrier_ref: weakref.ref) -> None:
        with self._weak_lock:
            entry = self._weak.get(key)
            if entry is None or entry[0] is not carrier_ref:
                return
            del self._weak[key]
        del entry  # released outside the lock

    def _from_namespace(self, carrier: object, namespace: dict) -> AttributeMap:
        attachments = namespace.get(NAMESPACE_ATTRIBUTE)
        if attachments is None:
            attachments = namespace.setdefault(NAMESPACE_ATTRIBUTE, _Attachments(id(carrier)))
        if not isinstance(attachments, _Attachments) or attachments.owner_id != id(carrier):
            attachments = self._reset_namespace(carrier, namespace)
        attributes = attachments.get(self)
        if attributes is None:
            candidate = AttributeMap()
            attributes = attachments.setdefault(self, candidate)
            if attributes is candidate:
                logger.debug(
                    "Created namespace attributes for %s in %s",
                    type(carrier).__qualname__, self._label,
                )
        return attributes

    def _reset_namespace(self, carrier: object, namespace: dict) -> _Attachments:
        with _reset_lock:
            attachments = namespace.get(NAMESPACE_ATTRIBUTE)
            if isinstance(attachments, _Attachments) and attachments.owner_id == id(carrier):
                return attachments
            attachments = _Attachments(id(carrier))
            namespace[NAMESPACE_ATTRIBUTE] = attachments
        logger.debug(
            "Reset copied attachments on %s in %s", type(carrier).__qualname__, self._label
        )
        return attachments

    def _from_pinned(self, carrier: object) -> AttributeMap:
        key = _pinned_key(carrier)
        attributes = self._pinned.get(key)
        if attributes is None:
            candidate = AttributeMap()
            attributes = self._pinned.setdefault(key, candidate)
            if attributes is candidate:
                logger.warning(
                    "%s instances cannot be weakly referenced; properties attached to them "
                    "are pinned for the life of %s",
                    type(carrier).__qualname__, self._label,
                )
        return attributes

    def __repr__(self) -> str:
        return f"WeakAttachmentTable({self._label})"
