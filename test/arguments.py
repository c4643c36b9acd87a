# python
"""
Argument specification tests.

Scope
- Validate ArgumentSpec construction and sanitization per kind (flag, keyword, positional).
- Validate read-only metadata properties and the typename used in messages.
- Validate binding: Scalar for arity 1, Multi above, defaults bound verbatim, unbinding.

Conventions
- Test method names follow CamelCase per project convention.
- Specs are built directly; parser-level behavior lives in test/parser.py.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from myargs import ArgumentKind, ArgumentSpec, Scalar, Multi


class TestArgumentSpecConstruction(TestCase):
    """Behavioral tests for ArgumentSpec metadata validation."""

    def testFlagDefaults(self):
        spec = ArgumentSpec(ArgumentKind.FLAG, "verbose", short_symbol="v")
        self.assertEqual(spec.long_name, "verbose")
        self.assertEqual(spec.short_symbol, "v")
        self.assertIs(spec.kind, ArgumentKind.FLAG)
        self.assertFalse(spec.required)
        self.assertEqual(spec.arity, 1)
        self.assertIsNone(spec.default_value)
        self.assertIsNone(spec.help_text)
        self.assertTrue(spec.is_flag)
        self.assertFalse(spec.bound)

    def testLongNameIsTrimmed(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "  count  ")
        self.assertEqual(spec.long_name, "count")

    def testLongNameMustBeString(self):
        with self.assertRaises(TypeError):
            ArgumentSpec(ArgumentKind.KEYWORD, 5)

    def testLongNameEmptyRejected(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.KEYWORD, "   ")

    def testLongNameWithSpaceRejected(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.KEYWORD, "two words")

    def testLongNameWithEqualsRejected(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.KEYWORD, "a=b")

    def testShortSymbolMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.FLAG, "verbose", short_symbol="vv")

    def testShortSymbolEqualsRejected(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.FLAG, "verbose", short_symbol="=")

    def testShortSymbolIsOptional(self):
        spec = ArgumentSpec(ArgumentKind.FLAG, "verbose")
        self.assertIsNone(spec.short_symbol)

    def testKindMustBeArgumentKind(self):
        with self.assertRaises(TypeError):
            ArgumentSpec("flag", "verbose")

    def testFlagCannotBeRequired(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.FLAG, "verbose", required=True)

    def testFlagCannotHaveDefault(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.FLAG, "verbose", default_value="yes")

    def testKeywordArityMustBeOne(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.KEYWORD, "count", arity=2)

    def testPositionalArityAboveOneAccepted(self):
        spec = ArgumentSpec(ArgumentKind.POSITIONAL, "pair", required=True, arity=2)
        self.assertEqual(spec.arity, 2)
        self.assertTrue(spec.is_positional)

    def testArityZeroRejected(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.POSITIONAL, "files", arity=0)

    def testArityBooleanRejected(self):
        with self.assertRaises(TypeError):
            ArgumentSpec(ArgumentKind.POSITIONAL, "files", arity=True)

    def testRequiredMustBeBoolean(self):
        with self.assertRaises(TypeError):
            ArgumentSpec(ArgumentKind.KEYWORD, "count", required=1)

    def testDefaultMustBeString(self):
        with self.assertRaises(TypeError):
            ArgumentSpec(ArgumentKind.KEYWORD, "count", default_value=5)

    def testHelpTextIsTrimmed(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "count", help_text="  how many  ")
        self.assertEqual(spec.help_text, "how many")

    def testHelpTextEmptyRejected(self):
        with self.assertRaises(ValueError):
            ArgumentSpec(ArgumentKind.KEYWORD, "count", help_text="  ")

    def testMetadataIsReadOnly(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "count")
        with self.assertRaises(AttributeError):
            spec.long_name = "other"  # type: ignore[misc]

    def testTypenameAndRepr(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "count", short_symbol="c")
        self.assertEqual(ArgumentSpec.__typename__, "argument-spec")
        self.assertTrue(repr(spec).startswith("argument-spec("))
        self.assertIn("long_name='count'", repr(spec))


class TestArgumentSpecBinding(TestCase):
    """Behavioral tests for value binding on specs."""

    def testBindScalar(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "count")
        spec._bind("5")
        self.assertTrue(spec.bound)
        self.assertEqual(spec.value, Scalar("5"))
        self.assertIsInstance(spec.value, Scalar)
        self.assertEqual(spec.resolve(), "5")

    def testBindMulti(self):
        spec = ArgumentSpec(ArgumentKind.POSITIONAL, "pair", arity=2)
        spec._bind("a", "b")
        self.assertIsInstance(spec.value, Multi)
        self.assertEqual(spec.resolve(), ("a", "b"))

    def testBindWrongCountRejected(self):
        spec = ArgumentSpec(ArgumentKind.POSITIONAL, "pair", arity=2)
        with self.assertRaises(ValueError):
            spec._bind("a")

    def testLastBindWins(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "count")
        spec._bind("1")
        spec._bind("2")
        self.assertEqual(spec.resolve(), "2")

    def testDefaultBoundAsScalarWhateverTheArity(self):
        spec = ArgumentSpec(ArgumentKind.POSITIONAL, "pair", arity=2, default_value="x")
        spec._bind_default(spec.default_value)
        self.assertEqual(spec.value, Scalar("x"))
        self.assertEqual(spec.resolve(), "x")

    def testUnbind(self):
        spec = ArgumentSpec(ArgumentKind.KEYWORD, "count")
        spec._bind("1")
        spec._unbind()
        self.assertFalse(spec.bound)
        self.assertIsNone(spec.resolve())


if __name__ == "__main__":
    unittest.main()
