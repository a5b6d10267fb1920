"""Tests for AttributeMap — the per-carrier name -> value store."""

import pytest

from tether._attributes import AttributeMap


class TestAttributeMap:
    def test_try_add_and_get(self):
        attributes = AttributeMap()
        assert attributes.try_add("a", 1) is True
        assert attributes.try_add("a", 2) is False
        assert attributes.try_get("a") == (True, 1)
        assert attributes.try_get("b") == (False, None)

    def test_try_remove(self):
        attributes = AttributeMap()
        attributes.set("a", None)
        assert attributes.try_remove("a") is True
        assert attributes.try_remove("a") is False

    def test_contains_and_len(self):
        attributes = AttributeMap()
        attributes.set("a", 1)
        attributes.set("b", 2)
        assert "a" in attributes
        assert "c" not in attributes
        assert len(attributes) == 2

    def test_snapshot(self):
        attributes = AttributeMap()
        attributes.set("a", 1)
        snap = attributes.snapshot()
        attributes.set("b", 2)
        assert snap == [("a", 1)]

    def test_factory_exception_leaves_map_untouched(self):
        attributes = AttributeMap()

        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            attributes.get_or_add("a", boom)
        assert "a" not in attributes

    def test_eq_exception_propagates(self):
        class Touchy:
            def __eq__(self, other):
                raise ValueError("no comparing")

            __hash__ = object.__hash__

        attributes = AttributeMap()
        value = Touchy()
        attributes.set("a", value)
        with pytest.raises(ValueError):
            attributes.try_update("a", 2, 1)
        assert attributes.try_get("a") == (True, value)

    def test_try_update_retries_when_replaced_by_equal_value(self):
        class Racy:
            """Swaps in an equal value the first time it is compared."""

            def __init__(self, attributes):
                self.attributes = attributes
                self.compared = 0

            def __eq__(self, other):
                self.compared += 1
                if self.compared == 1:
                    self.attributes.set("a", 5)
                return other == 5

            __hash__ = object.__hash__

        attributes = AttributeMap()
        racy = Racy(attributes)
        attributes.set("a", racy)

        assert attributes.try_update("a", "new", 5) is True
        assert attributes.try_get("a") == (True, "new")

    def test_repr(self):
        attributes = AttributeMap()
        attributes.set("b", 1)
        attributes.set("a", 2)
        assert repr(attributes) == "AttributeMap(['a', 'b'])"
