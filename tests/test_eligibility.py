"""Tests for carrier eligibility — identity-equatable, attachable types only."""

from dataclasses import dataclass

from tether import _eligibility
from tether._eligibility import is_eligible, check


class _Plain:
    pass


class _Slotted:
    __slots__ = ("value", "__weakref__")


class _SlottedNoWeakref:
    __slots__ = ("value",)


class _ValueLike:
    def __eq__(self, other):
        return isinstance(other, _ValueLike)

    __hash__ = object.__hash__


class _InheritsValueLike(_ValueLike):
    pass


class _HashOnly:
    def __hash__(self):
        return 1


@dataclass
class _EqDataclass:
    x: int = 0


@dataclass(eq=False)
class _IdentityDataclass:
    x: int = 0


class TestIsEligible:
    def test_plain_class(self):
        assert is_eligible(_Plain) is True

    def test_slotted_with_weakref(self):
        assert is_eligible(_Slotted) is True

    def test_slotted_without_weakref_or_dict(self):
        assert is_eligible(_SlottedNoWeakref) is False

    def test_builtin_value_types(self):
        for carrier_type in (int, float, str, bytes, tuple, frozenset, bool):
            assert is_eligible(carrier_type) is False

    def test_builtin_containers(self):
        for carrier_type in (list, dict, set):
            assert is_eligible(carrier_type) is False

    def test_bare_object_and_none(self):
        assert is_eligible(object) is False
        assert is_eligible(type(None)) is False

    def test_overrides_equality(self):
        assert is_eligible(_ValueLike) is False

    def test_ancestor_overrides_equality(self):
        assert is_eligible(_InheritsValueLike) is False

    def test_hash_override_alone_is_fine(self):
        assert is_eligible(_HashOnly) is True

    def test_dataclasses(self):
        assert is_eligible(_EqDataclass) is False
        assert is_eligible(_IdentityDataclass) is True

    def test_functions_and_classes(self):
        assert check(lambda: None) is True
        assert check(_Plain) is True


class TestCache:
    def test_result_cached_per_type(self):
        is_eligible(_Plain)
        assert _eligibility._cache[_Plain] is True

    def test_check_uses_exact_type(self):
        assert check(_Plain()) is True
        assert check(_InheritsValueLike()) is False

    def test_cache_does_not_pin_types(self):
        import gc
        import weakref

        dynamic = type("Dynamic", (), {})
        is_eligible(dynamic)
        ref = weakref.ref(dynamic)
        del dynamic
        gc.collect()
        assert ref() is None
