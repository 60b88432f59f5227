"""
Command registry behavioral tests (flat namespace of names and aliases).

Scope
- Validate that every key of a descriptor maps to the same instance.
- Validate last-write-wins collisions and primary-name listings.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from courier import CommandRegistry, Descriptor


def noop(context):
    pass


class TestCommandRegistry(TestCase):
    def setUp(self):
        self.registry = CommandRegistry()

    def testNameAndAliasesShareInstance(self):
        descriptor = self.registry.register(Descriptor("give", noop, aliases=("g", "gv")))
        for key in ("give", "g", "gv"):
            self.assertIs(self.registry.lookup(key), descriptor)
        self.assertEqual(len(self.registry), 3)

    def testUnknownLookupIsNone(self):
        self.assertIsNone(self.registry.lookup("missing"))
        self.assertNotIn("missing", self.registry)

    def testLookupIsCaseSensitive(self):
        self.registry.register(Descriptor("give", noop))
        self.assertIsNone(self.registry.lookup("GIVE"))

    def testCollisionLastWriteWins(self):
        first = self.registry.register(Descriptor("give", noop, aliases=("g",)))
        second = self.registry.register(Descriptor("grant", noop, aliases=("g",)))
        self.assertIs(self.registry.lookup("g"), second)
        self.assertIs(self.registry.lookup("give"), first)
        self.assertEqual(self.registry.all_primary(), (first, second))

    def testCollisionWithPrimaryNameIsLogged(self):
        self.registry.register(Descriptor("give", noop))
        with self.assertLogs("courier.registry", level="DEBUG") as logs:
            self.registry.register(Descriptor("grant", noop, aliases=("give",)))
        self.assertTrue(any("'give'" in line for line in logs.output))

    def testReachableSkipsTakenOverNames(self):
        first = self.registry.register(Descriptor("give", noop))
        second = self.registry.register(Descriptor("grant", noop, aliases=("give",)))
        self.assertEqual(self.registry.all_primary(), (first, second))
        self.assertEqual(self.registry.reachable(), (second,))

    def testAllPrimaryKeepsRegistrationOrder(self):
        names = ["status", "give", "help"]
        for name in names:
            self.registry.register(Descriptor(name, noop))
        self.assertEqual([descriptor.name for descriptor in self.registry.all_primary()], names)

    def testEntriesAreReadOnly(self):
        self.registry.register(Descriptor("give", noop))
        with self.assertRaises(TypeError):
            self.registry.entries["other"] = None

    def testRejectsNonDescriptor(self):
        with self.assertRaises(TypeError):
            self.registry.register(noop)


if __name__ == "__main__":
    unittest.main()
