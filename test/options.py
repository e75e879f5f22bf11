"""
OptionSpec and value-type tests.

Scope
- OptionSpec metadata sanitization (names, kind, descr/metavar/default).
- Derived properties (name, forms) and the generated reprs.
- Parsed value types: Present singleton, Single and Repeated equality/hashing.
"""

from __future__ import annotations

import pickle
import unittest
from unittest import TestCase

from gnuopt import (
    ArgumentKind,
    ArgumentValue,
    OptionSpec,
    Present,
    PresentType,
    Repeated,
    Single,
)
from gnuopt.faults import DefaultArgumentOnFlagError, NoNameError


class TestOptionSpec(TestCase):
    """Construction and sanitization of OptionSpec."""

    def testDefaults(self):
        spec = OptionSpec("a")
        self.assertEqual(spec.short, "a")
        self.assertIsNone(spec.long)
        self.assertIs(spec.kind, ArgumentKind.NONE)
        self.assertIsNone(spec.descr)
        self.assertIsNone(spec.metavar)
        self.assertIsNone(spec.default)

    def testStringsAreTrimmed(self):
        spec = OptionSpec(long="out", kind="required", descr="  where to write ", metavar=" FILE ")
        self.assertEqual(spec.descr, "where to write")
        self.assertEqual(spec.metavar, "FILE")

    def testDefaultKeptVerbatim(self):
        self.assertEqual(OptionSpec("o", kind="optional", default=" ").default, " ")
        self.assertEqual(OptionSpec("o", kind="optional", default="").default, "")

    def testBlankTextRejected(self):
        with self.assertRaises(ValueError):
            OptionSpec("a", descr="   ")
        with self.assertRaises(ValueError):
            OptionSpec("a", metavar="")
        with self.assertRaises(TypeError):
            OptionSpec("a", descr=3)
        with self.assertRaises(TypeError):
            OptionSpec("a", kind="required", default=3)

    def testKindFromString(self):
        for kind in ArgumentKind:
            self.assertIs(OptionSpec("a", kind=kind.value).kind, kind)
        with self.assertRaises(ValueError):
            OptionSpec("a", kind="REQUIRED")

    def testNoName(self):
        with self.assertRaises(NoNameError):
            OptionSpec()
        with self.assertRaises(NoNameError):
            OptionSpec(None, None)

    def testDefaultOnFlag(self):
        with self.assertRaises(DefaultArgumentOnFlagError):
            OptionSpec("a", default="x")
        self.assertEqual(OptionSpec("a", kind="multiple", default="x").default, "x")

    def testShortShape(self):
        for name in ("", "ab", "-"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                OptionSpec(name)
        self.assertEqual(OptionSpec("=").short, "=")

    def testLongShape(self):
        for name in ("", "a b", "a=b", "-a"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                OptionSpec(long=name)
        self.assertEqual(OptionSpec(long="dry-run").long, "dry-run")

    def testNameAndForms(self):
        self.assertEqual(OptionSpec("o", "output").name, "o")
        self.assertEqual(OptionSpec(long="output").name, "output")
        self.assertEqual(OptionSpec("o", "output").forms, ("-o", "--output"))
        self.assertEqual(OptionSpec(long="output").forms, ("--output",))
        self.assertEqual(OptionSpec("o").forms, ("-o",))

    def testReadOnly(self):
        spec = OptionSpec("a")
        with self.assertRaises(AttributeError):
            spec.short = "b"

    def testRepr(self):
        spec = OptionSpec("a", "all")
        self.assertEqual(type(spec).__typename__, "option-spec")
        self.assertTrue(repr(spec).startswith("option-spec(short='a', long='all', "))


class TestValues(TestCase):
    """Present, Single and Repeated."""

    def testPresentIsSingleton(self):
        self.assertIs(PresentType(), Present)
        self.assertEqual(repr(Present), "Present")
        self.assertEqual(Present.values, ())
        self.assertIs(pickle.loads(pickle.dumps(Present)), Present)

    def testPresentNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (PresentType,), {})

    def testSingle(self):
        self.assertEqual(Single("x"), Single("x"))
        self.assertNotEqual(Single("x"), Single("y"))
        self.assertNotEqual(Single("x"), Repeated(["x"]))
        self.assertEqual(hash(Single("x")), hash(Single("x")))
        self.assertEqual(Single("x").value, "x")
        self.assertEqual(Single("x").values, ("x",))
        self.assertEqual(repr(Single("x")), "Single('x')")
        with self.assertRaises(TypeError):
            Single(1)

    def testRepeated(self):
        values = Repeated(["a"])
        extended = values.extended("b")
        self.assertEqual(values.values, ("a",))
        self.assertEqual(extended.values, ("a", "b"))
        self.assertEqual(extended, Repeated(("a", "b")))
        self.assertEqual(len({extended, Repeated(["a", "b"])}), 1)
        self.assertEqual(repr(extended), "Repeated(['a', 'b'])")
        with self.assertRaises(TypeError):
            Repeated(["a", None])

    def testCommonBase(self):
        for value in (Present, Single("x"), Repeated()):
            self.assertIsInstance(value, ArgumentValue)


if __name__ == "__main__":
    unittest.main()
