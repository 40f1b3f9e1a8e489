"""
Argument store behavioral tests.

Scope
- Validate initialization, reset and positional extraction.
- Validate named registration (duplicates, forced overrides).
- Validate transactions, fault dispatch in shell mode and tracing.

Conventions
- Test method names follow CamelCase per project convention.
- Stores are built with an explicit environment mapping.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from unittest import TestCase

from paramount import (
    ArgumentStore,
    ConfigurationFormatError,
    DuplicateArgumentError,
    OverriddenArgumentWarning,
)
from paramount.faults import console
from paramount.values import Absent, Flag, Text


class TestInitialization(TestCase):
    """Behavioral tests for set_command_argument_set() and reset()."""

    def testLeadingPositionalsAreExtracted(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {}, ["build", "test", "-Verbose", "tail"])
        self.assertEqual(store.positional, ["build", "test"])
        self.assertEqual(store.unknown, ["-Verbose", "tail"])

    def testNamedValuesAreWrapped(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {"Configuration": "Release", "Clean": True})
        self.assertEqual(store.named, {"Configuration": Text("Release"), "Clean": Flag(True)})

    def testReinitializationReplacesEverything(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {"A": "1"}, ["x", "-B", "2"])
        store.set_command_argument_set(None, {}, ["-C", "3"])
        self.assertEqual(store.named, {})
        self.assertEqual(store.positional, [])
        self.assertEqual(store.unknown, ["-C", "3"])

    def testReset(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {"A": "1"}, ["x", "-B", "2"])
        store.reset()
        self.assertEqual((store.configuration, store.named, store.positional, store.unknown), ({}, {}, [], []))
        store.reset()
        self.assertEqual((store.configuration, store.named, store.positional, store.unknown), ({}, {}, [], []))

    def testNoneNamedValuesAreNotRegistered(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {"A": None, "B": "1"})
        self.assertEqual(store.named, {"B": Text("1")})
        store.add_command_argument("A", "1")
        self.assertEqual(store.lookup_named("A"), Text("1"))

    def testFieldsAreCopies(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {}, ["x"])
        store.positional.append("y")
        self.assertEqual(store.positional, ["x"])

    def testIllTypedInputsAreRejected(self):
        store = ArgumentStore(environ={})
        with self.assertRaises(TypeError):
            store.set_command_argument_set(None, [], [])
        with self.assertRaises(TypeError):
            store.set_command_argument_set(None, {}, "-Name value")
        with self.assertRaises(TypeError):
            ArgumentStore(environ=[])
        with self.assertRaises(TypeError):
            ArgumentStore(shell=1)

    def testMalformedConfigurationKeepsThePreviousState(self):
        with tempfile.TemporaryDirectory() as root:
            with open(os.path.join(root, "build.json"), "w", encoding="utf-8") as stream:
                stream.write("[")
            store = ArgumentStore(environ={})
            store.set_command_argument_set(None, {"A": "1"})
            with self.assertRaises(ConfigurationFormatError):
                store.set_command_argument_set(root, {}, ["x"])
            self.assertEqual(store.named, {"A": Text("1")})


class TestRegistration(TestCase):
    """Behavioral tests for add_command_argument()."""

    def setUp(self):
        self.store = ArgumentStore(environ={})
        self.store.set_command_argument_set(None)

    def testRegister(self):
        self.store.add_command_argument("Name", "value")
        self.assertEqual(self.store.lookup_named("Name"), Text("value"))
        self.assertIs(self.store.lookup_named("Other"), Absent)

    def testDuplicateIsRejected(self):
        self.store.add_command_argument("Name", "value")
        with self.assertRaises(DuplicateArgumentError) as context:
            self.store.add_command_argument("Name", "other")
        self.assertEqual(context.exception.options["name"], "Name")
        self.assertEqual(self.store.lookup_named("Name"), Text("value"))

    def testForceReplacesWithAWarning(self):
        self.store.add_command_argument("Name", "value")
        with self.assertWarns(OverriddenArgumentWarning):
            self.store.add_command_argument("Name", "other", force=True)
        self.assertEqual(self.store.lookup_named("Name"), Text("other"))

    def testRegisteringNoneKeepsTheNameFree(self):
        self.store.add_command_argument("Name", None)
        self.assertEqual(self.store.named, {})
        self.store.add_command_argument("Name", "value")
        self.assertEqual(self.store.lookup_named("Name"), Text("value"))

    def testShellModeExitsOnDuplicates(self):
        store = ArgumentStore(environ={}, shell=True, colorful=False)
        store.add_command_argument("Name", "value")
        with console.capture() as capture:
            with self.assertRaises(SystemExit):
                store.add_command_argument("Name", "other")
        self.assertIn("21111", capture.get())


class TestSources(TestCase):
    """Behavioral tests for the lookup helpers, consume() and transaction()."""

    def testEnvironmentLookupIsExact(self):
        store = ArgumentStore(environ={"Build_Tag": "x"})
        self.assertEqual(store.lookup_environment("Build_Tag"), Text("x"))
        self.assertIs(store.lookup_environment("build_tag"), Absent)

    def testConsumingTheHeadReextractsPositionals(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {}, ["-Name", "value", "tail", "-Other"])
        store.consume((0, 1), "Name", Text("value"))
        self.assertEqual(store.named, {"Name": Text("value")})
        self.assertEqual(store.positional, ["tail"])
        self.assertEqual(store.unknown, ["-Other"])

    def testTransactionRestoresOnFailure(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {}, ["-Name", "value", "tail"])
        with self.assertRaises(RuntimeError):
            with store.transaction():
                store.consume((0, 1), "Name", Text("value"))
                raise RuntimeError("boom")
        self.assertEqual(store.named, {})
        self.assertEqual(store.positional, [])
        self.assertEqual(store.unknown, ["-Name", "value", "tail"])

    def testTransactionKeepsChangesOnSuccess(self):
        store = ArgumentStore(environ={})
        store.set_command_argument_set(None, {}, ["-Name", "value"])
        with store.transaction():
            store.consume((0, 1), "Name", Text("value"))
        self.assertEqual(store.unknown, [])

    def testTraceLogsOnTheConsole(self):
        store = ArgumentStore(environ={}, trace=True)
        with console.capture() as capture:
            store.set_command_argument_set(None, {}, ["x"])
        self.assertIn("extracted 1 positional token", capture.get())

    def testRepr(self):
        store = ArgumentStore(environ={})
        self.assertEqual(repr(store), "ArgumentStore(configuration={}, named={}, positional=[], unknown=[])")


if __name__ == "__main__":
    unittest.main()
