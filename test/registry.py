# python
"""
Registry tests.

Scope
- Registration order, duplicate long names, prefix clashes.
- Shared short symbols: warning by default, error in strict mode, first spec wins.
- Lookups by long name and short symbol with kind filters; clear().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from myargs import (
    ArgumentKind,
    ArgumentSpec,
    Registry,
    DuplicateArgumentError,
    AmbiguousShortSymbolError,
    AmbiguousShortSymbolWarning,
    FaultCode,
)


def flag(name, symbol=None):
    return ArgumentSpec(ArgumentKind.FLAG, name, short_symbol=symbol)


def keyword(name, symbol=None):
    return ArgumentSpec(ArgumentKind.KEYWORD, name, short_symbol=symbol)


def positional(name, symbol=None, arity=1):
    return ArgumentSpec(ArgumentKind.POSITIONAL, name, short_symbol=symbol, required=True, arity=arity)


class TestRegistration(TestCase):
    """Behavioral tests for Registry.register()."""

    def testRegisterReturnsSpecAndKeepsOrder(self):
        registry = Registry()
        first = registry.register(flag("verbose", "v"))
        second = registry.register(keyword("count", "c"))
        third = registry.register(positional("input"))
        self.assertEqual(first.long_name, "verbose")
        self.assertEqual(registry.all(), (first, second, third))
        self.assertEqual(list(registry), [first, second, third])
        self.assertEqual(len(registry), 3)
        self.assertIn("count", registry)

    def testRegisterRejectsNonSpec(self):
        with self.assertRaises(TypeError):
            Registry().register("verbose")

    def testDuplicateLongNameRejected(self):
        registry = Registry()
        registry.register(flag("verbose", "v"))
        with self.assertRaises(DuplicateArgumentError) as context:
            registry.register(keyword("verbose"))
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_ARGUMENT)
        self.assertEqual(context.exception.argument, "verbose")
        self.assertEqual(len(registry), 1)

    def testLongNameStartingWithPrefixRejected(self):
        with self.assertRaises(ValueError):
            Registry().register(flag("-verbose"))

    def testShortSymbolEqualToPrefixRejected(self):
        with self.assertRaises(ValueError):
            Registry(prefix="+").register(flag("verbose", "+"))

    def testSharedSymbolWarnsAndFirstWins(self):
        registry = Registry()
        first = registry.register(flag("verbose", "v"))
        with self.assertWarns(AmbiguousShortSymbolWarning) as context:
            registry.register(flag("version", "v"))
        self.assertEqual(context.warning.options["owner"], "verbose")
        self.assertIs(registry.find_by_short_symbol("v"), first)

    def testSharedSymbolRejectedWhenStrict(self):
        registry = Registry(strict_symbols=True)
        registry.register(flag("verbose", "v"))
        with self.assertRaises(AmbiguousShortSymbolError) as context:
            registry.register(flag("version", "v"))
        self.assertEqual(context.exception.code, FaultCode.AMBIGUOUS_SHORT_SYMBOL)
        self.assertNotIn("version", registry)


class TestLookup(TestCase):
    """Behavioral tests for lookups and clear()."""

    def setUp(self):
        self.registry = Registry()
        self.verbose = self.registry.register(flag("verbose", "v"))
        self.count = self.registry.register(keyword("count", "c"))
        self.input = self.registry.register(positional("input", "i"))
        self.pair = self.registry.register(positional("pair", arity=2))

    def testFindByLongName(self):
        self.assertIs(self.registry.find_by_long_name("count"), self.count)
        self.assertIsNone(self.registry.find_by_long_name("missing"))

    def testFindByLongNameWithKindFilter(self):
        self.assertIsNone(self.registry.find_by_long_name("input", ArgumentKind.FLAG, ArgumentKind.KEYWORD))
        self.assertIs(self.registry.find_by_long_name("input", ArgumentKind.POSITIONAL), self.input)

    def testFindByShortSymbol(self):
        self.assertIs(self.registry.find_by_short_symbol("c"), self.count)
        self.assertIsNone(self.registry.find_by_short_symbol("x"))

    def testFindByShortSymbolWithKindFilter(self):
        self.assertIsNone(self.registry.find_by_short_symbol("i", ArgumentKind.FLAG, ArgumentKind.KEYWORD))

    def testPositionalsInDeclarationOrder(self):
        self.assertEqual(self.registry.positionals(), (self.input, self.pair))

    def testClearUnbindsAndDrops(self):
        self.count._bind("5")
        self.registry.clear()
        self.assertEqual(len(self.registry), 0)
        self.assertFalse(self.count.bound)

    def testRepr(self):
        self.assertEqual(repr(self.registry), "registry('verbose', 'count', 'input', 'pair')")


if __name__ == "__main__":
    unittest.main()
