# python
"""
Task index behavioral tests.

Scope
- (type token, operation token) lookup, default operation fallback.
- Hidden operations, inherited operations, duplicate and shadowed entries.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from rym.faults import DuplicateOperationError
from rym.index import TaskIndex
from rym.tasks import Operation, TaskType


class Base:
    def shared(self):
        pass


class ReadFile(Base):
    def execute(self, path):
        pass

    def tail(self, path, lines: int = 10):
        pass

    def close(self):
        pass


class Deploy:
    def push(self):
        pass


class TestTaskIndex(TestCase):
    """Behavioral tests for TaskIndex."""

    def setUp(self):
        self.types = [TaskType.inspect(ReadFile), TaskType.inspect(Deploy)]
        self.index = TaskIndex(self.types, default="Execute", ignore=("close",))

    def testExactLookup(self):
        task, operation = self.index.lookup("read-file", "tail")
        self.assertIs(task, self.types[0])
        self.assertEqual(operation.name, "tail")

    def testEmptyTokenResolvesDefault(self):
        _, operation = self.index.lookup("read-file")
        self.assertEqual(operation.name, "execute")
        self.assertEqual(self.index.default, "execute")

    def testNoDefaultOperation(self):
        self.assertIsNone(self.index.lookup("deploy"))

    def testUnknownTokens(self):
        self.assertIsNone(self.index.lookup("read-file", "head"))
        self.assertIsNone(self.index.lookup("nope"))

    def testIgnoredOperationHidden(self):
        self.assertIsNone(self.index.lookup("read-file", "close"))

    def testInheritedOperationHidden(self):
        self.assertIsNone(self.index.lookup("read-file", "shared"))

    def testOperationsInOrder(self):
        names = [(task.token, operation.token) for task, operation in self.index.operations]
        self.assertEqual(names, [("read-file", "execute"), ("read-file", "tail"), ("deploy", "push")])
        self.assertEqual(len(self.index), 3)

    def testIsDefault(self):
        operations = {operation.name: operation for _, operation in self.index.operations}
        self.assertTrue(self.index.isdefault(operations["execute"]))
        self.assertFalse(self.index.isdefault(operations["tail"]))

    def testSiblings(self):
        task, operation = self.index.lookup("read-file")
        siblings = self.index.siblings(task, operation)
        self.assertEqual([x.name for _, x in siblings], ["tail"])

    def testDefaultDisabled(self):
        index = TaskIndex(self.types, default=None)
        self.assertIsNone(index.lookup("read-file"))
        self.assertIsNone(index.default)

    def testDuplicateOperationRejected(self):
        task = TaskType("Twice", dict, [Operation("read_file"), Operation("ReadFile")])
        with self.assertRaises(DuplicateOperationError):
            TaskIndex([task])

    def testShadowedTypeFirstWins(self):
        first = TaskType("Deploy", dict, [Operation("push")])
        second = TaskType("deploy", dict, [Operation("pull")])
        index = TaskIndex([first, second])
        self.assertIs(index.lookup("deploy", "push")[0], first)
        self.assertIsNone(index.lookup("deploy", "pull"))
        self.assertEqual(index.types, (first,))

    def testEntriesMustBeTaskTypes(self):
        with self.assertRaises(TypeError):
            TaskIndex([ReadFile])


if __name__ == "__main__":
    unittest.main()
