# python
"""
Utility helpers tests (Unset sentinel, coalesce, rename, mirror, pluralize, IntrospectiveType).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from unittest import TestCase

from myargs.utils import Unset, UnsetType, coalesce, rename, mirror, pluralize, IntrospectiveType


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnsetPickleRoundTripKeepsIdentity(self):
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-811
                pass

    def testUnsetUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))


class TestHelpers(TestCase):
    """Behavioral tests for coalesce, rename, mirror and pluralize."""

    def testCoalesce(self):
        self.assertEqual(coalesce("name", "fallback"), "name")
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertIsNone(coalesce(Unset))

    def testRenameCallable(self):
        def function():
            pass

        rename(function, "renamed")
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")

            def __init__(self):
                self._items = ["a", "b"]
                self._mapping = {"k": "v"}

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(TypeError):
            holder.mapping["k"] = "w"  # type: ignore[index]

    def testPluralize(self):
        self.assertEqual(pluralize("flag"), "flags")
        self.assertEqual(pluralize("keyword"), "keywords")
        self.assertEqual(pluralize("positional"), "positionals")
        self.assertEqual(pluralize("required entry"), "required entries")
        self.assertEqual(pluralize("Box"), "Boxes")


class TestIntrospectiveType(TestCase):
    """Behavioral tests for the record metaclass."""

    def testGeneratedPropertiesAndRepr(self):
        class SampleRecord(metaclass=IntrospectiveType):
            __introspectable__ = ("name", "size")

            def __init__(self, name, size):
                self._name = name
                self._size = size

        record = SampleRecord("a", 1)
        self.assertEqual(SampleRecord.__typename__, "sample-record")
        self.assertEqual(record.name, "a")
        self.assertEqual(record.size, 1)
        self.assertEqual(repr(record), "sample-record(name='a', size=1)")
        with self.assertRaises(AttributeError):
            record.name = "b"  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
