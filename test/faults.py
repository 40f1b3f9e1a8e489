"""
Faults behavioral tests (codes, options, rendering, trigger).

Scope
- Validate stable fault codes and per-class defaults.
- Validate option overrides, __replace__ copies and trigger() dispatch.
- Validate rich rendering in plain and fancy modes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.panel import Panel

from paramount.faults import (
    DuplicateArgumentError,
    FaultCode,
    MissingMandatoryArgumentError,
    NoMatchingParameterSetError,
    OverriddenArgumentWarning,
    ParameterException,
    console,
    getdoc,
    trigger,
)


class TestFaults(TestCase):
    """Behavioral tests for fault classes."""

    def testClassDefaults(self):
        fault = DuplicateArgumentError("argument 'A' is already set")
        self.assertIs(fault.code, FaultCode.DUPLICATE_ARGUMENT)
        self.assertEqual(fault.title, "duplicated argument")
        self.assertEqual(str(fault), "argument 'A' is already set")
        self.assertIsInstance(fault, ParameterException)

    def testOptionsOverrideDefaults(self):
        fault = MissingMandatoryArgumentError("missing", hint="pass it", parameter="A")
        self.assertEqual(fault.hint, "pass it")
        self.assertEqual(fault.options["parameter"], "A")

    def testReplaceReturnsACopy(self):
        fault = MissingMandatoryArgumentError("missing", parameter="A")
        copy = fault.__replace__(shell=False)
        self.assertIsNot(copy, fault)
        self.assertEqual(copy.options["parameter"], "A")
        self.assertEqual(str(copy), "missing")

    def testNoMatchCarriesItsFailures(self):
        inner = MissingMandatoryArgumentError("missing")
        fault = NoMatchingParameterSetError("none", exceptions=[inner])
        self.assertEqual(fault.exceptions, (inner,))
        self.assertEqual(fault.__replace__().exceptions, (inner,))

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.CONFIGURATION_FORMAT.normalize(), "21101")
        self.assertEqual(int(FaultCode.NO_MATCHING_PARAMETER_SET), 21132)

    def testGetdocRequiresACode(self):
        self.assertIsNone(getdoc(FaultCode.DUPLICATE_ARGUMENT))
        with self.assertRaises(TypeError):
            getdoc(21111)


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testErrorsAreRaised(self):
        with self.assertRaises(DuplicateArgumentError):
            trigger(DuplicateArgumentError("duplicated"))

    def testWarningsAreIssued(self):
        with self.assertWarns(OverriddenArgumentWarning):
            trigger(OverriddenArgumentWarning("replaced"))

    def testShellWarningsArePrinted(self):
        with console.capture() as capture:
            trigger(OverriddenArgumentWarning("replaced"), shell=True, colorful=False)
        self.assertIn("replaced", capture.get())

    def testShellErrorsExit(self):
        with console.capture() as capture:
            with self.assertRaises(SystemExit) as context:
                trigger(DuplicateArgumentError("duplicated"), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Duplicated Argument", capture.get())
        self.assertIn("pass force=True", capture.get())

    def testNonFaultsAreRejected(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestRendering(TestCase):
    """Behavioral tests for __rich__."""

    def testFancyRendersAPanel(self):
        self.assertIsInstance(DuplicateArgumentError("duplicated", fancy=True).__rich__(), Panel)

    def testPlainRenderingHasHeaderMessageAndHint(self):
        with console.capture() as capture:
            console.print(MissingMandatoryArgumentError("missing 'A'", hint="pass -A", colorful=False))
        output = capture.get()
        self.assertIn("21121", output)
        self.assertIn("missing 'A'", output)
        self.assertIn("→ pass -A", output)


if __name__ == "__main__":
    unittest.main()
