"""
Utilities behavioral tests.

Scope
- Validate the Unset sentinel and coalesce().
- Validate tokenize() for plain and partial lines.
- Validate matching() ordering, de-duplication and type checks.
- Validate ordinal() words and suffixes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from courier.utils import Unset, UnsetType, coalesce, freeze, matching, ordinal, tokenize


class TestUnset(TestCase):
    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestTokenize(TestCase):
    def testPlainLine(self):
        self.assertEqual(tokenize("  give  steve 10 "), ["give", "steve", "10"])
        self.assertEqual(tokenize(""), [])

    def testPartialLine(self):
        self.assertEqual(tokenize("give steve ", partial=True), ["give", "steve", ""])
        self.assertEqual(tokenize("give st", partial=True), ["give", "st"])
        self.assertEqual(tokenize(" ", partial=True), [""])
        self.assertEqual(tokenize("", partial=True), [""])
        self.assertEqual(tokenize("", partial=False), [])

    def testTokenList(self):
        self.assertEqual(tokenize(("give", "")), ["give", ""])
        with self.assertRaises(TypeError):
            tokenize(["give", 10])
        with self.assertRaises(TypeError):
            tokenize(10)


class TestMatching(TestCase):
    def testPrefixFilter(self):
        self.assertEqual(matching(["red", "green", "grey", "green"], "gr"), ["green", "grey"])
        self.assertEqual(matching(["red"], ""), ["red"])
        self.assertEqual(matching(["Red"], "r"), [])

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            matching(["red", 1], "r")


class TestHelpers(TestCase):
    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        with self.assertRaises(ValueError):
            ordinal(0)

    def testFreeze(self):
        self.assertEqual(freeze(["a"]), ("a",))
        self.assertEqual(freeze({"a"}), frozenset({"a"}))
        self.assertEqual(freeze("text"), "text")
        with self.assertRaises(TypeError):
            freeze({"a": 1})["b"] = 2


if __name__ == "__main__":
    unittest.main()
