"""
Utility helpers tests.

Scope
- Unset sentinel semantics and coalesce().
- namesake() matching rules (case-insensitive, empty never matches).
- ordinal() labels and mirror() read-only views.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from types import MappingProxyType
from unittest import TestCase

from helmsman.utils import Unset, UnsetType, coalesce, mirror, namesake, ordinal, rename


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class _(UnsetType):  # NOQA
                pass

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestNamesake(TestCase):

    def testCaseInsensitive(self):
        self.assertTrue(namesake("Commit", "commit"))
        self.assertTrue(namesake("ST", "st"))
        self.assertFalse(namesake("commit", "commits"))

    def testEmptyNeverMatches(self):
        self.assertFalse(namesake("", ""))
        self.assertFalse(namesake(None, None))
        self.assertFalse(namesake("name", None))
        self.assertFalse(namesake(None, "name"))


class TestHelpers(TestCase):

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(23), "23rd")

    def testMirrorReturnsImmutableViews(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testRename(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")


if __name__ == "__main__":
    unittest.main()
