"""
Descriptors module behavioral tests (strategies, slots, declarative builder).

Scope
- Validate Descriptor construction: normalization of aliases, field checks.
- Validate strategy derivation and construction-time plan checking
  (HandlerSignatureError instead of a failure at first dispatch).
- Validate subcommand() defaults derived from the decorated function.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API exported by the courier package.
- Annotations stay eagerly evaluated: the annotation checks need classes.
"""

import unittest
from unittest import TestCase

from courier import (
    CONTEXT,
    DEFAULT,
    INVOKER,
    PRINCIPAL,
    BoundHandler,
    Descriptor,
    DirectCallback,
    FaultCode,
    HandlerSignatureError,
    Joined,
    Resolved,
    strategy,
    subcommand,
)


class TestDescriptor(TestCase):
    """Behavioral tests for Descriptor fields."""

    def testPlainCallableBecomesDirectCallback(self):
        descriptor = Descriptor("ping", lambda context: "pong")
        self.assertIsInstance(descriptor.strategy, DirectCallback)
        self.assertEqual(descriptor.invoke(None), "pong")

    def testDefaults(self):
        descriptor = Descriptor("ping", lambda context: None)
        self.assertEqual(descriptor.aliases, ())
        self.assertEqual(descriptor.description, "")
        self.assertEqual(descriptor.parameters, "")
        self.assertEqual(descriptor.help, ())
        self.assertIsNone(descriptor.permission)
        self.assertEqual(descriptor.minimum, 0)
        self.assertFalse(descriptor.principal)
        self.assertIs(descriptor.completions, DEFAULT)

    def testAliasesDeduplicatedInOrder(self):
        descriptor = Descriptor("give", lambda context: None, aliases=["g", "gv", "g"])
        self.assertEqual(descriptor.aliases, ("g", "gv"))
        self.assertEqual(descriptor.keys, ("give", "g", "gv"))

    def testNameMustNotContainWhitespace(self):
        with self.assertRaises(ValueError):
            Descriptor("give money", lambda context: None)
        with self.assertRaises(ValueError):
            Descriptor("", lambda context: None)

    def testAliasesRejectBareString(self):
        with self.assertRaises(TypeError):
            Descriptor("give", lambda context: None, aliases="g")

    def testMinimumMustBeNonNegative(self):
        with self.assertRaises(ValueError):
            Descriptor("give", lambda context: None, minimum=-1)
        with self.assertRaises(TypeError):
            Descriptor("give", lambda context: None, minimum=True)

    def testCompletionsMustBeStringOrDefault(self):
        with self.assertRaises(TypeError):
            Descriptor("give", lambda context: None, completions=["a", "b"])

    def testStrategyMustBeCallable(self):
        with self.assertRaises(TypeError):
            Descriptor("give", "not callable")

    def testPermittedWithoutPermission(self):
        descriptor = Descriptor("ping", lambda context: None)
        self.assertTrue(descriptor.permitted(object()))

    def testDefaultSentinel(self):
        self.assertFalse(DEFAULT)
        self.assertEqual(repr(DEFAULT), "DEFAULT")
        self.assertIs(type(DEFAULT)(), DEFAULT)


class TestStrategies(TestCase):
    """Construction-time validation of DirectCallback and BoundHandler."""

    def testDirectCallbackNeedsOneParameter(self):
        with self.assertRaises(HandlerSignatureError) as caught:
            DirectCallback(lambda: None)
        self.assertEqual(caught.exception.code, FaultCode.HANDLER_SIGNATURE)

    def testBoundHandlerArityMismatch(self):
        with self.assertRaises(HandlerSignatureError):
            BoundHandler([CONTEXT, Resolved(int)], lambda context: None)

    def testBoundHandlerRejectsNonSlot(self):
        with self.assertRaises(HandlerSignatureError):
            BoundHandler([CONTEXT, int], lambda context, amount: None)

    def testBoundHandlerAssignsPositions(self):
        handler = BoundHandler(
            [INVOKER, Resolved(str), Resolved(int), Joined()],
            lambda invoker, who, amount, reason: None,
        )
        self.assertEqual(handler.plan, (INVOKER, Resolved(str, index=0), Resolved(int, index=1), Joined(2)))
        self.assertEqual(handler.required, 2)

    def testExplicitIndexContinuesNumbering(self):
        handler = BoundHandler([Resolved(int, index=2), Resolved(str)], lambda a, b: None)
        self.assertEqual(handler.plan, (Resolved(int, index=2), Resolved(str, index=3)))
        self.assertEqual(handler.required, 4)

    def testAnnotationMismatchRejected(self):
        def pay(amount: str = Resolved(int), /):
            pass

        with self.assertRaises(HandlerSignatureError):
            strategy(pay)

    def testAnnotationMatchAccepted(self):
        def pay(context=CONTEXT, amount: int = Resolved(int), /):
            pass

        self.assertIsInstance(strategy(pay), BoundHandler)

    def testStrategyDerivation(self):
        def direct(context):
            pass

        def bound(player=PRINCIPAL, target=Resolved(str), /):
            pass

        def broken(context, amount=1):
            pass

        self.assertIsInstance(strategy(direct), DirectCallback)
        self.assertIsInstance(strategy(bound), BoundHandler)
        with self.assertRaises(HandlerSignatureError):
            strategy(broken)

    def testSlotReprs(self):
        self.assertEqual(repr(CONTEXT), "CONTEXT")
        self.assertEqual(repr(Resolved(int)), "Resolved(int)")
        self.assertEqual(repr(Resolved("int8", index=1)), "Resolved('int8', index=1)")
        self.assertEqual(repr(Joined(3)), "Joined(3)")


class TestSubcommand(TestCase):
    """Declarative descriptors built from functions."""

    def testDerivedMetadata(self):

        @subcommand(aliases=("g",), parameters="<who> <amount>")
        def give_money(context=CONTEXT, who=Resolved(str), amount=Resolved(int), /):
            """Give money to someone.

            The amount is taken from the invoker's balance.
            """

        self.assertIsInstance(give_money, Descriptor)
        self.assertEqual(give_money.name, "give-money")
        self.assertEqual(give_money.description, "Give money to someone.")
        self.assertEqual(give_money.minimum, 2)
        self.assertEqual(give_money.aliases, ("g",))

    def testExplicitMetadataWins(self):

        @subcommand(name="say", description="Broadcast", minimum=0)
        def broadcast(context=CONTEXT, message=Joined(), /):
            """Ignored."""

        self.assertEqual(broadcast.name, "say")
        self.assertEqual(broadcast.description, "Broadcast")
        self.assertEqual(broadcast.minimum, 0)

    def testBareDecorator(self):

        @subcommand
        def status(context):
            pass

        self.assertEqual(status.name, "status")
        self.assertEqual(status.minimum, 0)
        self.assertIsInstance(status.strategy, DirectCallback)

    def testSignatureErrorsSurfaceAtDecoration(self):
        with self.assertRaises(HandlerSignatureError):
            @subcommand
            def broken(context, amount):
                pass


if __name__ == "__main__":
    unittest.main()
