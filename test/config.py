# python
"""
Configuration behavioral tests.

Scope
- Settings: validation, defaults, program name resolution.
- read_procfile(): task-definition file lines to root option tokens.

Conventions
- Test method names follow CamelCase per project convention.
"""

import os
import sys
import tempfile
import unittest
from unittest import TestCase, mock

from rich.console import Console

from rym.config import Settings, progname, read_procfile


class TestSettings(TestCase):
    """Behavioral tests for Settings."""

    def testDefaults(self):
        settings = Settings(program="rym")
        self.assertEqual(settings.default, "execute")
        self.assertEqual(settings.ignore, ("close",))
        self.assertEqual(settings.program, "rym")

    def testConsoleCreatedLazily(self):
        self.assertIsInstance(Settings().console, Console)

    def testExplicitConsoleKept(self):
        console = Console()
        self.assertIs(Settings(console=console).console, console)

    def testDefaultMustBeString(self):
        with self.assertRaises(TypeError):
            Settings(default=1)

    def testDefaultMayBeDisabled(self):
        self.assertIsNone(Settings(default=None).default)

    def testIgnoreMustNotBeString(self):
        with self.assertRaises(TypeError):
            Settings(ignore="close")

    def testProgramFromArgv(self):
        with mock.patch.object(sys, "argv", [os.path.join("bin", "Rym.exe")]):
            self.assertEqual(progname(), "rym")
            self.assertEqual(Settings().program, "rym")

    def testProgramFromMainOverride(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__prog__", "make", create=True):
            self.assertEqual(progname(), "make")


class TestProcfile(TestCase):
    """Behavioral tests for read_procfile()."""

    def write(self, text):
        directory = tempfile.TemporaryDirectory()
        self.addCleanup(directory.cleanup)
        path = os.path.join(directory.name, "Rymfile")
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def testLinesBecomeOptions(self):
        path = self.write("module=build.tasks\n  debug  \n")
        self.assertEqual(read_procfile(path), ["--module=build.tasks", "--debug"])

    def testCommentsAndBlanksSkipped(self):
        path = self.write("# comment\n\n   \n  # indented comment\nwork-dir=out\n")
        self.assertEqual(read_procfile(path), ["--work-dir=out"])

    def testMissingFileReadsEmpty(self):
        self.assertEqual(read_procfile(os.path.join(tempfile.gettempdir(), "rym-missing", "Rymfile")), [])


if __name__ == "__main__":
    unittest.main()
