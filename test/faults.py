"""
Faults module behavioral tests (aborts, outcomes, configuration errors).

Scope
- Validate Abort fields and copies.
- Validate Outcome construction, truthiness, equality and unwrap().
- Validate configuration error codes and their rich rendering.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console
from rich.panel import Panel

from courier import (
    Abort,
    ConfigurationError,
    FaultCode,
    HandlerSignatureError,
    MissingCompletionError,
    MissingResolverError,
    Outcome,
    getdoc,
)


class TestAbort(TestCase):
    def testDefaults(self):
        abort = Abort()
        self.assertEqual(abort.message, "")
        self.assertTrue(abort.prefix)
        self.assertIsNone(abort.code)
        self.assertTrue(abort.silent)

    def testReplace(self):
        abort = Abort("nope", code=FaultCode.NO_PERMISSION)
        copy = abort.__replace__(prefix=False)
        self.assertEqual(copy.message, "nope")
        self.assertFalse(copy.prefix)
        self.assertEqual(copy.code, FaultCode.NO_PERMISSION)

    def testValidation(self):
        with self.assertRaises(TypeError):
            Abort(42)
        with self.assertRaises(TypeError):
            Abort("nope", code=11101)


class TestOutcome(TestCase):
    def testCompleted(self):
        outcome = Outcome.completed("value")
        self.assertTrue(outcome)
        self.assertEqual(outcome.value, "value")
        self.assertEqual(outcome.unwrap(), "value")
        self.assertEqual(repr(outcome), "Outcome.completed('value')")

    def testAborted(self):
        outcome = Outcome.aborted(Abort("nope", prefix=False, code=FaultCode.INVALID_USAGE))
        self.assertFalse(outcome)
        self.assertIsNone(outcome.value)
        self.assertEqual(outcome.message, "nope")
        self.assertFalse(outcome.prefix)
        with self.assertRaises(Abort) as caught:
            outcome.unwrap()
        self.assertEqual(caught.exception.code, FaultCode.INVALID_USAGE)

    def testEquality(self):
        self.assertEqual(Outcome.completed(1), Outcome.completed(1))
        self.assertNotEqual(Outcome.completed(1), Outcome.completed(2))
        self.assertNotEqual(Outcome.completed(), Outcome.aborted(Abort()))
        with self.assertRaises(TypeError):
            hash(Outcome.completed())

    def testAbortedRequiresAbort(self):
        with self.assertRaises(TypeError):
            Outcome.aborted(ValueError())


class TestConfigurationError(TestCase):
    def testDefaultCodes(self):
        self.assertEqual(MissingResolverError("x").code, FaultCode.MISSING_RESOLVER)
        self.assertEqual(MissingCompletionError("x").code, FaultCode.MISSING_COMPLETION)
        self.assertEqual(HandlerSignatureError("x").code, FaultCode.HANDLER_SIGNATURE)
        self.assertIsNone(ConfigurationError("x").code)

    def testRichRendering(self):
        error = MissingResolverError("no resolver for complex", hint="register one")
        self.assertIsInstance(error.__rich__(), Panel)
        console = Console(record=True, width=100, file=io.StringIO())
        console.print(error)
        output = console.export_text()
        self.assertIn("no resolver for complex", output)
        self.assertIn("register one", output)
        self.assertIn(FaultCode.MISSING_RESOLVER.normalize(), output)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.INVALID_USAGE.normalize(), "11112")

    def testGetdocWithoutDocs(self):
        self.assertIsNone(getdoc(FaultCode.INVALID_USAGE))
        with self.assertRaises(TypeError):
            getdoc(11112)


if __name__ == "__main__":
    unittest.main()
