# python
"""
Option schema behavioral tests.

Scope
- Switch specs (Option, Flag): name validation, alias ordering, metavar defaults.
- Decorator factories (option/flag): handler wiring.
- OptionSet.parse(): inline and spaced values, optional values, "--", residue.
- OptionSet.describe(): one line per spec with a description column.

Conventions
- Test method names follow CamelCase per project convention.
- Handlers record what they receive in a local list.
"""

import unittest
from unittest import TestCase

from rym.faults import MissingParameterError
from rym.options import Flag, MissingValueError, Option, OptionSet, flag, option


class TestSwitchSpecs(TestCase):
    """Construction and validation of Option and Flag."""

    def testNamesRequired(self):
        with self.assertRaises(TypeError):
            Flag()

    def testInvalidNameRejected(self):
        with self.assertRaises(ValueError):
            Option("procfile")
        with self.assertRaises(ValueError):
            Option("--under_score")

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Flag("--debug", "--debug")

    def testShortAliasesFirst(self):
        self.assertEqual(Option("--procfile", "-f").names, ("-f", "--procfile"))

    def testMetavarDefaultsToLongName(self):
        self.assertEqual(Option("-f", "--procfile").metavar, "PROCFILE")

    def testEmptyDescrRejected(self):
        with self.assertRaises(ValueError):
            Flag("--debug", descr="  ")

    def testDescrDefaultsToNone(self):
        self.assertIsNone(Flag("--debug").descr)

    def testCallingWithoutHandlerIsNoop(self):
        self.assertIsNone(Flag("--debug")())

    def testDecoratorBindsHandler(self):
        received = []

        @option("--module")
        def module(value, /):
            received.append(value)

        self.assertIsInstance(module, Option)
        module("tasks.**")
        self.assertEqual(received, ["tasks.**"])

    def testFlagDecorator(self):
        self.assertIsInstance(flag("--debug")(lambda value, /: None), Flag)


class TestOptionSetParse(TestCase):
    """Behavioral tests for OptionSet.parse()."""

    def setUp(self):
        self.received = []
        record = self.received.append
        self.options = OptionSet([
            Flag("--debug", callback=lambda value, /: record(("debug", value))),
            Option("-f", "--procfile", callback=lambda value, /: record(("procfile", value))),
            Option("--jobs", required=False, callback=lambda value, /: record(("jobs", value))),
        ])

    def testInlineValue(self):
        self.assertEqual(self.options.parse(["--procfile=Build"]), [])
        self.assertEqual(self.received, [("procfile", "Build")])

    def testSpacedValue(self):
        self.options.parse(["-f", "Build"])
        self.assertEqual(self.received, [("procfile", "Build")])

    def testInlineValueKeepsEquals(self):
        self.options.parse(["--procfile=a=b"])
        self.assertEqual(self.received, [("procfile", "a=b")])

    def testFlagWithoutValue(self):
        self.options.parse(["--debug"])
        self.assertEqual(self.received, [("debug", None)])

    def testFlagInlineValuePassedThrough(self):
        self.options.parse(["--debug=false"])
        self.assertEqual(self.received, [("debug", "false")])

    def testOptionalValueBare(self):
        self.assertEqual(self.options.parse(["--jobs", "4"]), ["4"])
        self.assertEqual(self.received, [("jobs", None)])

    def testResidueKeepsOrder(self):
        self.assertEqual(self.options.parse(["build", "--debug", "clean"]), ["build", "clean"])

    def testUnknownSwitchStaysInResidue(self):
        self.assertEqual(self.options.parse(["--unknown=1", "-x"]), ["--unknown=1", "-x"])
        self.assertEqual(self.received, [])

    def testNegativeNumberStaysInResidue(self):
        self.assertEqual(self.options.parse(["-5"]), ["-5"])

    def testDoubleDashStopsParsing(self):
        self.assertEqual(self.options.parse(["--", "--debug", "x"]), ["--debug", "x"])
        self.assertEqual(self.received, [])

    def testRepeatedSwitchCallsHandlerTwice(self):
        self.options.parse(["-f", "a", "-f", "b"])
        self.assertEqual(self.received, [("procfile", "a"), ("procfile", "b")])

    def testMissingValueRaises(self):
        with self.assertRaises(MissingValueError) as context:
            self.options.parse(["build", "--procfile"])
        self.assertIsInstance(context.exception, MissingParameterError)
        self.assertIn("--procfile", str(context.exception))

    def testNameClashRejected(self):
        with self.assertRaises(ValueError):
            self.options.add(Flag("-f"))

    def testLookup(self):
        self.assertIn("-f", self.options)
        self.assertIs(self.options["-f"], self.options["--procfile"])
        self.assertEqual(len(self.options), 3)


class TestOptionSetDescribe(TestCase):
    """Behavioral tests for OptionSet.describe()."""

    def testLayout(self):
        options = OptionSet([
            Option("-f", "--procfile", descr="task definition file"),
            Option("--jobs", required=False, descr="parallel jobs"),
            Flag("--debug"),
        ])
        lines = options.describe().plain.splitlines()
        self.assertEqual(lines[0], "  -f, --procfile=PROCFILE    task definition file")
        self.assertEqual(lines[1], "  --jobs[=JOBS]" + " " * 14 + "parallel jobs")
        self.assertEqual(lines[2], "  --debug")

    def testLongNamesWrapDescription(self):
        options = OptionSet([Option("--a-very-long-option-name", descr="text")])
        lines = options.describe().plain.splitlines()
        self.assertEqual(lines[1], " " * 29 + "text")

    def testMultilineDescriptionIndented(self):
        options = OptionSet([Flag("--debug", descr="first\nsecond")])
        lines = options.describe().plain.splitlines()
        self.assertEqual(lines[1], " " * 29 + "second")


if __name__ == "__main__":
    unittest.main()
