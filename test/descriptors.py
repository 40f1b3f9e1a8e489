"""
Parameter descriptor behavioral tests.

Scope
- Validate ParameterDescriptor/ParameterSet construction, normalization and immutability.
- Validate load_parameter_sets() and its format errors.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from unittest import TestCase

from paramount import (
    ALL_PARAMETER_SETS,
    ConfigurationFormatError,
    ParameterDescriptor,
    ParameterSet,
    load_parameter_sets,
)


class TestParameterDescriptor(TestCase):
    """Behavioral tests for ParameterDescriptor."""

    def testDefaults(self):
        parameter = ParameterDescriptor("Name")
        self.assertEqual(parameter.aliases, ())
        self.assertFalse(parameter.switch)
        self.assertFalse(parameter.mandatory)
        self.assertEqual(parameter.position, -1)
        self.assertFalse(parameter.positional)

    def testNamesListThePrimaryNameFirst(self):
        self.assertEqual(ParameterDescriptor("Verbose", "v", "Loud").names, ("Verbose", "v", "Loud"))

    def testFieldsAreReadOnly(self):
        parameter = ParameterDescriptor("Name")
        with self.assertRaises(AttributeError):
            parameter.name = "Other"

    def testInvalidNamesAreRejected(self):
        with self.assertRaises(ValueError):
            ParameterDescriptor("1st")
        with self.assertRaises(ValueError):
            ParameterDescriptor("Name", "with space")
        with self.assertRaises(TypeError):
            ParameterDescriptor(1)

    def testDuplicatedAliasesAreRejected(self):
        with self.assertRaises(ValueError):
            ParameterDescriptor("Name", "name")

    def testFlagsMustBeBooleans(self):
        with self.assertRaises(TypeError):
            ParameterDescriptor("Name", switch="yes")
        with self.assertRaises(TypeError):
            ParameterDescriptor("Name", position=True)

    def testEqualityAndRepr(self):
        self.assertEqual(ParameterDescriptor("A", position=0), ParameterDescriptor("A", position=0))
        self.assertIn("name='A'", repr(ParameterDescriptor("A")))


class TestParameterSet(TestCase):
    """Behavioral tests for ParameterSet."""

    def testSequenceBehaviour(self):
        first, second = ParameterDescriptor("A"), ParameterDescriptor("B", "Beta")
        parameters = ParameterSet("Set", [first, second])
        self.assertEqual(list(parameters), [first, second])
        self.assertEqual(len(parameters), 2)
        self.assertIs(parameters[1], second)
        self.assertEqual(parameters.names, frozenset({"A", "B"}))

    def testDefaultNameIsTheUniversalMarker(self):
        self.assertEqual(ParameterSet().name, ALL_PARAMETER_SETS)
        self.assertTrue(ParameterSet().universal)
        self.assertFalse(ParameterSet("Set").universal)

    def testDuplicatedNamesAreRejected(self):
        with self.assertRaises(ValueError):
            ParameterSet("Set", [ParameterDescriptor("A"), ParameterDescriptor("A", switch=True)])

    def testEmptyNameIsRejected(self):
        with self.assertRaises(ValueError):
            ParameterSet("  ")

    def testMembersMustBeDescriptors(self):
        with self.assertRaises(TypeError):
            ParameterSet("Set", ["A"])


class TestLoadParameterSets(TestCase):
    """Behavioral tests for load_parameter_sets()."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.directory.name, "task.json")

    def tearDown(self):
        self.directory.cleanup()

    def write(self, content):
        with open(self.path, "w", encoding="utf-8") as stream:
            stream.write(content if isinstance(content, str) else json.dumps(content))

    def testSetsAreRead(self):
        self.write({"sets": [
            {"name": "Build", "parameters": [
                {"name": "TaskName", "mandatory": True, "position": 0},
                {"name": "Verbose", "aliases": ["v"], "switch": True},
            ]},
            {"parameters": [{"name": "Root"}]},
        ]})
        build, common = load_parameter_sets(self.path)
        self.assertEqual(build, ParameterSet("Build", [
            ParameterDescriptor("TaskName", mandatory=True, position=0),
            ParameterDescriptor("Verbose", "v", switch=True),
        ]))
        self.assertTrue(common.universal)

    def testInvalidJsonIsAFormatError(self):
        self.write("{")
        with self.assertRaises(ConfigurationFormatError) as context:
            load_parameter_sets(self.path)
        self.assertEqual(context.exception.options["path"], self.path)

    def testUndecodableFileIsAFormatError(self):
        with open(self.path, "wb") as stream:
            stream.write(b'{"sets": "\xff"}')
        with self.assertRaises(ConfigurationFormatError) as context:
            load_parameter_sets(self.path)
        self.assertEqual(context.exception.options["path"], self.path)

    def testMissingFileIsAFormatError(self):
        with self.assertRaises(ConfigurationFormatError):
            load_parameter_sets(os.path.join(self.directory.name, "missing.json"))

    def testSchemaViolationsAreFormatErrors(self):
        for document in ({}, {"sets": {}}, {"sets": [{"parameters": [{}]}]}, {"sets": [{"parameters": [{"name": "1"}]}]}):
            with self.subTest(document=document):
                self.write(document)
                with self.assertRaises(ConfigurationFormatError):
                    load_parameter_sets(self.path)


if __name__ == "__main__":
    unittest.main()
