"""
Tests for the internal utilities (Unset sentinel, coalesce, rename, mirror).

Scope
- Unset: singleton identity, falsy semantics, representation, finality and
  PEP 604 unions in isinstance checks.
- coalesce(): only Unset is replaced.
- rename(): function and decorator forms, argument validation.
- mirror(): read-only properties and frozen container views.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from argwalk.utils import *


class UnsetTest(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCopiesKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnionIsinstance(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(1, str | Unset)


class CoalesceTest(TestCase):
    """Behavioral tests for coalesce()."""

    def testUnsetReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyKept(self):
        for value in (None, 0, "", ()):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    """Behavioral tests for rename()."""

    def testFunctionForm(self):
        def original():
            pass

        self.assertIs(rename(original, "renamed"), original)
        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")

    def testInvalidArguments(self):
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename(42)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(42)


class MirrorTest(TestCase):
    """Behavioral tests for mirror()."""

    class Holder:
        items = mirror("items")
        table = mirror("table")
        names = mirror("names")
        label = mirror("label")

        def __init__(self):
            self._items = [1, 2]
            self._table = {"a": 1}
            self._names = {"x"}
            self._label = "text"

    def testFrozenViews(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.names, frozenset({"x"}))
        self.assertEqual(holder.label, "text")

    def testReadOnly(self):
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testViewsTrackBackingField(self):
        holder = self.Holder()
        holder._items.append(3)
        self.assertEqual(holder.items, (1, 2, 3))

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == "__main__":
    unittest.main()
