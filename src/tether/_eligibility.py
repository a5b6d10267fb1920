"""Carrier eligibility — which types may have properties attached.

Attachment is keyed by identity. A type that redefines equality could make two
distinct instances look "equal" and silently share properties, so such types
are refused unless the caller explicitly bypasses validation.

Results are cached per exact type, process-wide. The cache holds types weakly
so dynamically created classes are not pinned by it.
"""

from __future__ import annotations

import weakref

_cache: weakref.WeakKeyDictionary[type, bool] = weakref.WeakKeyDictionary()


def is_eligible(carrier_type: type) -> bool:
    """True if instances of carrier_type may act as carriers."""
    eligible = _cache.get(carrier_type)
    if eligible is None:
        eligible = _cache.setdefault(carrier_type, _compute(carrier_type))
    return eligible


def check(carrier: object) -> bool:
    return is_eligible(type(carrier))


def _compute(carrier_type: type) -> bool:
    # Instances need somewhere to hang an identity-keyed attachment.
    if not (carrier_type.__dictoffset__ or carrier_type.__weakrefoffset__):
        return False
    return not _overrides_equality(carrier_type)


def _overrides_equality(carrier_type: type) -> bool:
    for klass in carrier_type.__mro__:
        if klass is object:
            continue
        if "__eq__" in vars(klass):
            return True
    return False
