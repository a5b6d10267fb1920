"""Per-carrier attribute map — name -> value storage for one (scope, carrier).

Reads are single dict operations and never lock. Every mutation is a short
compare-and-install under a per-map reentrant lock. Factories, updaters and
value __eq__ always run outside the lock, followed by an optimistic re-check.
Values displaced by a mutation are held in a local until the lock is
released, so their destructors never run under it.

Code can still run under the lock: a cyclic GC pass triggered by an
allocation (with any finalizers or weakref callbacks it fires), and the
__hash__/__eq__ of str subclasses used as names. The lock is an RLock so such
code re-entering the same map on the same thread cannot self-deadlock.
Contention stays local to one carrier.
"""

from __future__ import annotations

import threading
from typing import Callable

_MISSING = object()


class AttributeMap:
    """Thread-safe mapping from property name to value."""

    __slots__ = ("_values", "_lock")

    def __init__(self) -> None:
        self._values: dict[str, object] = {}
        self._lock = threading.RLock()

    def try_get(self, name: str) -> tuple[bool, object]:
        value = self._values.get(name, _MISSING)
        if value is _MISSING:
            return False, None
        return True, value

    def try_add(self, name: str, value: object) -> bool:
        with self._lock:
            if name in self._values:
                return False
            self._values[name] = value
            return True

    def try_remove(self, name: str) -> bool:
        with self._lock:
            removed = self._values.pop(name, _MISSING)
        return removed is not _MISSING

    def try_update(self, name: str, new_value: object, expected: object) -> bool:
        """Replace the value only if it currently equals expected.

        Equality is checked outside the lock; the swap then only happens if
        the exact object that was compared is still installed. A concurrent
        replacement forces a fresh comparison.
        """
        while True:
            current = self._values.get(name, _MISSING)
            if current is _MISSING or not current == expected:
                return False
            with self._lock:
                if self._values.get(name, _MISSING) is current:
                    self._values[name] = new_value
                    return True

    def get_or_add(self, name: str, factory: Callable[[], object]) -> object:
        """Return the existing value, or install factory() and return it.

        factory may run in several threads at once; only one result is kept
        and every caller gets that one.
        """
        value = self._values.get(name, _MISSING)
        if value is not _MISSING:
            return value
        candidate = factory()
        with self._lock:
            return self._values.setdefault(name, candidate)

    def add_or_update(
        self,
        name: str,
        factory: Callable[[], object],
        updater: Callable[[object], object],
    ) -> object:
        """Install factory() if absent, else updater(current). Retries on races."""
        while True:
            current = self._values.get(name, _MISSING)
            if current is _MISSING:
                candidate = factory()
                with self._lock:
                    if name not in self._values:
                        self._values[name] = candidate
                        return candidate
            else:
                candidate = updater(current)
                with self._lock:
                    if self._values.get(name, _MISSING) is current:
                        self._values[name] = candidate
                        return candidate

    def set(self, name: str, value: object) -> None:
        with self._lock:
            previous = self._values.get(name, _MISSING)
            self._values[name] = value
        del previous  # released outside the lock

    def snapshot(self) -> list[tuple[str, object]]:
        """Point-in-time copy of every connected (name, value) pair."""
        with self._lock:
            return list(self._values.items())

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        return f"AttributeMap({sorted(self._values)!r})"
