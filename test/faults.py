"""
Fault tests (messages, codes, rendering, trigger/invoke behavior).

Scope
- Registration and parse error messages and their FaultCodes.
- trigger(): raises outside shell mode, prints and exits inside it.
- __rich__ rendering in plain and fancy mode.
- invoke(): argv/str/iterable prompts, shell and non-shell error handling.
"""

from __future__ import annotations

import io
import sys
import unittest
from contextlib import redirect_stderr
from unittest import TestCase, mock

from rich.console import Console

from gnuopt import (
    ArgumentKind,
    ExtraneousArgumentError,
    FaultCode,
    IllegalOptionError,
    MissingArgumentError,
    ParseError,
    Present,
    Schema,
    Single,
    invoke,
    trigger,
)
from gnuopt import faults
from gnuopt.faults import DefaultArgumentOnFlagError, DuplicateOptionError, NoNameError


def render(fault, **options):
    buffer = io.StringIO()
    Console(file=buffer, width=120, color_system=None).print(fault.__replace__(**options))
    return buffer.getvalue()


class TestMessages(TestCase):

    def testRegistrationMessages(self):
        self.assertEqual(str(NoNameError()), "option has no name")
        self.assertEqual(str(DuplicateOptionError("a")), "duplicate option a")
        self.assertEqual(str(DefaultArgumentOnFlagError("v")), "default argument for option v with kind none")

    def testRegistrationCodes(self):
        self.assertEqual(NoNameError.code, FaultCode.NO_NAME)
        self.assertEqual(DuplicateOptionError.code, FaultCode.DUPLICATE_NAME)
        self.assertEqual(DefaultArgumentOnFlagError.code, FaultCode.DEFAULT_ON_FLAG)

    def testParseMessages(self):
        self.assertEqual(str(IllegalOptionError("-x")), "illegal option -x")
        self.assertEqual(str(MissingArgumentError("--out")), "missing argument for --out")
        self.assertEqual(str(ExtraneousArgumentError("--all")), "--all takes no argument")

    def testParseCodes(self):
        self.assertEqual(IllegalOptionError("-x").code, FaultCode.ILLEGAL_OPTION)
        self.assertEqual(MissingArgumentError("-x").code, FaultCode.MISSING_ARGUMENT)
        self.assertEqual(ExtraneousArgumentError("-x").code, FaultCode.EXTRANEOUS_ARGUMENT)

    def testOptionKept(self):
        fault = IllegalOptionError("--nope")
        self.assertEqual(fault.option, "--nope")
        self.assertIsInstance(fault, ParseError)

    def testNormalizeUsesMainCodes(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__codes__", {FaultCode.ILLEGAL_OPTION: "E-ILL"}, create=True):
            self.assertEqual(FaultCode.ILLEGAL_OPTION.normalize(), "E-ILL")
            self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "11117")


class TestTrigger(TestCase):

    def testReplaceMergesOptions(self):
        fault = IllegalOptionError("-x", prog="a")
        replaced = fault.__replace__(shell=False)
        self.assertIsNot(replaced, fault)
        self.assertEqual(dict(replaced.options), {"prog": "a", "shell": False})
        self.assertEqual(replaced.option, "-x")

    def testRaisesOutsideShell(self):
        with self.assertRaises(IllegalOptionError) as caught:
            trigger(IllegalOptionError("-x"), shell=False, prog="tool")
        self.assertEqual(caught.exception.options["prog"], "tool")

    def testExitsInShell(self):
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=120, color_system=None)):
            with self.assertRaises(SystemExit) as caught:
                trigger(MissingArgumentError("-o"), shell=True, prog="tool")
        self.assertEqual(caught.exception.code, 1)
        self.assertIn("missing argument for -o", buffer.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestRendering(TestCase):

    def testPlain(self):
        output = render(IllegalOptionError("-x"), prog="tool", colorful=False)
        self.assertIn("[ tool — 11112 | Illegal Option ]", output)
        self.assertIn("illegal option -x", output)
        self.assertIn("-x is not a known option", output)

    def testTitleAndHintOverrides(self):
        output = render(MissingArgumentError("-o"), prog="tool", title="oops", hint="try harder")
        self.assertIn("Oops", output)
        self.assertIn("try harder", output)

    def testFancy(self):
        output = render(ExtraneousArgumentError("--all"), prog="tool", fancy=True)
        self.assertIn("tool", output)
        self.assertIn("--all takes no argument", output)
        self.assertIn("╭", output)


class TestInvoke(TestCase):

    def setUp(self):
        self.schema = Schema(prog="tool", arguments="FILE")
        self.schema.add("v", "verbose")
        self.schema.add("o", "output", ArgumentKind.REQUIRED, metavar="FILE")

    def testStringPrompt(self):
        result = invoke(self.schema, "-v -o 'a b' in.txt", shell=False)
        self.assertIs(result["v"], Present)
        self.assertEqual(result["output"], Single("a b"))
        self.assertEqual(result.positionals, ("in.txt",))

    def testIterablePrompt(self):
        result = invoke(self.schema, iter(["-o", "x"]), shell=False)
        self.assertEqual(result["o"], Single("x"))

    def testArgvPrompt(self):
        with mock.patch.object(sys, "argv", ["tool", "-vofile", "rest"]):
            result = invoke(self.schema, shell=False)
        self.assertEqual(result["o"], Single("file"))
        self.assertEqual(list(result), ["rest"])

    def testRaisesOutsideShell(self):
        with self.assertRaises(MissingArgumentError) as caught:
            invoke(self.schema, ["-o"], shell=False)
        self.assertEqual(caught.exception.options["prog"], "tool")

    def testExitsInShell(self):
        usage, fault = io.StringIO(), io.StringIO()
        with mock.patch.object(faults, "console", Console(file=fault, width=120, color_system=None)):
            with redirect_stderr(usage), self.assertRaises(SystemExit) as caught:
                invoke(self.schema, ["--nope"], colorful=False)
        self.assertEqual(caught.exception.code, 1)
        self.assertIn("Usage: tool [options] FILE", usage.getvalue())
        self.assertIn("illegal option --nope", fault.getvalue())


if __name__ == "__main__":
    unittest.main()
