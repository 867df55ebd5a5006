# python
"""
Utility behavioral tests: name transform, sentinel and module globbing.

Scope
- dasherize(): identifiers in either case style map to one CLI token.
- Unset / coalesce(): the "not provided" sentinel.
- mglob(): dotted module globs over installed packages.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from rym.utils import Unset, UnsetType, coalesce, dasherize, mglob


class TestDasherize(TestCase):
    """Behavioral tests for the identifier to token transform."""

    def testPascalCase(self):
        self.assertEqual(dasherize("ReadFile"), "read-file")

    def testSnakeCase(self):
        self.assertEqual(dasherize("read_file"), "read-file")

    def testCaseStylesConverge(self):
        self.assertEqual(dasherize("ReadFile"), dasherize("read_file"))

    def testSingleWord(self):
        self.assertEqual(dasherize("Execute"), "execute")

    def testDigitsStayAttached(self):
        self.assertEqual(dasherize("Test2"), "test2")
        self.assertEqual(dasherize("arg1"), "arg1")

    def testAcronymRun(self):
        self.assertEqual(dasherize("HTTPServer"), "http-server")

    def testDigitBeforeCapital(self):
        self.assertEqual(dasherize("Version2Task"), "version2-task")

    def testTokenIsIdempotent(self):
        self.assertEqual(dasherize("read-file"), "read-file")

    def testEdgeSeparatorsStripped(self):
        self.assertEqual(dasherize("_hidden_"), "hidden")

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            dasherize(42)


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testSubclassingRejected(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestModuleGlob(TestCase):
    """Behavioral tests for dotted module globbing."""

    def testConcreteNameReturnedAsIs(self):
        self.assertEqual(mglob("tasks"), ["tasks"])

    def testDirectChildren(self):
        modules = mglob("json.*")
        self.assertIn("json.decoder", modules)
        self.assertNotIn("json", modules)

    def testRecursiveIncludesPackage(self):
        modules = mglob("json.**")
        self.assertIn("json", modules)
        self.assertIn("json.encoder", modules)

    def testCharacterClass(self):
        self.assertEqual(mglob("json.[de]*coder"), ["json.decoder", "json.encoder"])

    def testUnknownPackageMatchesNothing(self):
        self.assertEqual(mglob("rym_missing_package_for_tests.*"), [])

    def testWildcardPrefixRejected(self):
        with self.assertRaises(ValueError):
            mglob("*.tasks")

    def testEmptyRejected(self):
        with self.assertRaises(ValueError):
            mglob("  ")

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            mglob(["tasks"])


if __name__ == "__main__":
    unittest.main()
