# python
"""
Utility tests.

Scope
- Unset sentinel semantics and coalesce().
- rename() forms and view() freezing.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from argmatch.utils import Unset, UnsetType, coalesce, rename, view


class TestUnset(TestCase):
    """Sentinel behavior."""

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(Unset, 80), 80)
        self.assertIsNone(coalesce(None, 80))
        self.assertEqual(coalesce(0, 80), 0)
        self.assertEqual(coalesce("", "x"), "")


class TestRename(TestCase):
    """Callable naming."""

    def testBothForms(self):
        def first(): ...
        self.assertIs(rename(first, "alpha"), first)
        self.assertEqual((first.__name__, first.__qualname__), ("alpha", "alpha"))

        @rename("beta")
        def second(): ...
        self.assertEqual(second.__name__, "beta")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()


class TestView(TestCase):
    """Read-only properties."""

    class Record:
        aliases = view("aliases")
        table = view("table")
        names = view("names")
        text = view("text")

        def __init__(self):
            self._aliases = ["-a", "--all"]
            self._table = {"a": 1}
            self._names = {"x"}
            self._text = "plain"

    def testFreezesContainers(self):
        record = self.Record()
        self.assertEqual(record.aliases, ("-a", "--all"))
        self.assertIsInstance(record.table, MappingProxyType)
        self.assertEqual(record.names, frozenset({"x"}))
        self.assertEqual(record.text, "plain")

    def testIsReadOnly(self):
        record = self.Record()
        with self.assertRaises(AttributeError):
            record.aliases = ()
        self.assertEqual(type(self).Record.aliases.fget.__name__, "aliases")


if __name__ == "__main__":
    unittest.main()
