# python
"""
Fault hierarchy tests.

Scope
- ArgumentException / ArgumentWarning: message, options, __replace__.
- trigger(): raising, warning, shell-mode printing and exit statuses.
- rich rendering and host code remapping through __main__.__codes__.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import io
import sys
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from argmatch import (
    ArgumentException, DuplicateAliasWarning, FaultCode, HelpRequested, MalformedValueError,
    MatchError, SpecificationError, ValueKind, trigger
)


def render(fault):
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(fault)
    return console.file.getvalue()


class TestFaults(TestCase):
    """Construction and copying."""

    def testMessageAndOptions(self):
        fault = MalformedValueError("-n: malformed integer 'x'", code=FaultCode.MALFORMED_VALUE, alias="-n", token="x", kind=ValueKind.LONG)
        self.assertEqual(str(fault), "-n: malformed integer 'x'")
        self.assertEqual(fault.code, FaultCode.MALFORMED_VALUE)
        self.assertEqual((fault.alias, fault.token, fault.kind), ("-n", "x", ValueKind.LONG))
        self.assertIsInstance(fault, MatchError)
        with self.assertRaises(TypeError):
            fault.options["alias"] = "-m"  # NOQA: read-only mapping

    def testSpecificationErrorIsValueError(self):
        self.assertTrue(issubclass(SpecificationError, ValueError))

    def testReplaceKeepsTypeAndMergesOptions(self):
        fault = SpecificationError("bad", code=FaultCode.ILLEGAL_CHARACTERS, title="illegal characters")
        copy = fault.__replace__(hint="fix it")
        self.assertIsInstance(copy, SpecificationError)
        self.assertEqual(copy.options["hint"], "fix it")
        self.assertEqual(copy.options["title"], "illegal characters")
        self.assertNotIn("hint", fault.options)


class TestTrigger(TestCase):
    """Surfacing faults."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(SpecificationError) as context:
            trigger(SpecificationError("bad", code=FaultCode.ILLEGAL_CHARACTERS), hint="x")
        self.assertEqual(context.exception.options["hint"], "x")

    def testWarnsOutsideShell(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(DuplicateAliasWarning("alias '-q' is already declared by -q", code=FaultCode.DUPLICATE_ALIAS))
            self.assertTrue(any(issubclass(w.category, DuplicateAliasWarning) for w in caught))

    def testShellModePrintsAndExits(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(
                SpecificationError("bad spec", code=FaultCode.ILLEGAL_CHARACTERS, title="illegal characters"),
                shell=True,
                colorful=False,
                prog="demo"
            )
        self.assertEqual(context.exception.code, 1)
        self.assertIn("bad spec", stderr.getvalue())
        self.assertIn("demo", stderr.getvalue())

    def testShellModeHelpGoesToStdout(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            trigger(HelpRequested("Usage: demo\nOptions include:\n\n", code=FaultCode.HELP_REQUESTED), shell=True)
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage: demo", stdout.getvalue())

    def testShellModeWarningPrintsOnly(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            trigger(DuplicateAliasWarning("duplicate -q", code=FaultCode.DUPLICATE_ALIAS, title="duplicate alias"), shell=True)
        self.assertIn("duplicate -q", stderr.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestRendering(TestCase):
    """rich output."""

    def testHeaderMessageAndHint(self):
        fault = ArgumentException("something failed", code=FaultCode.MISSING_VALUES, title="missing values", hint="add a value", prog="demo")
        output = render(fault)
        self.assertIn("[ demo — 32101 | Missing Values ]", output)
        self.assertIn("something failed", output)
        self.assertIn("→ add a value", output)

    def testHostCodeRemapping(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.MISSING_VALUES: "E-MISSING"}, create=True):
            self.assertEqual(FaultCode.MISSING_VALUES.normalize(), "E-MISSING")
            self.assertEqual(FaultCode.OUT_OF_RANGE.normalize(), "32104")
        self.assertEqual(FaultCode.MISSING_VALUES.normalize(), "32101")


if __name__ == "__main__":
    unittest.main()
