"""
Task index: (type token, operation token) → operation.

Building
- only operations a task type declares itself are indexed (TaskType.owns).
- operations named in 'ignore' (by name or token) are never exposed.
- the operation whose token equals dasherize(default) is also reachable through
  the empty operation token.
- two operations of one type sharing a token are rejected.

Lookup
- exact operation token first; the default fallback applies to the empty token
  only, so an explicit token always wins over the default.
"""
import logging

from .faults import DuplicateOperationError
from .tasks import TaskType
from .utils import dasherize

log = logging.getLogger(__name__)


class TaskIndex:
    """
    Lookup table over a set of task types.

    Parameters
    - types: iterable of TaskType descriptors.
    - default: name of the default operation (None disables the fallback).
    - ignore: operation names hidden from the CLI (lifecycle hooks like close).
    """

    def __init__(self, types, /, *, default=None, ignore=()):
        self._default = dasherize(default) if default else None
        self._ignore = frozenset(map(dasherize, ignore))
        self._types = {}
        self._entries = {}
        self._operations = []

        for task in types:
            if not isinstance(task, TaskType):
                raise TypeError("task index entries must be task types")
            if self._types.setdefault(task.token, task) is not task:
                log.debug("task type %r shadowed by an earlier %r", task.name, self._types[task.token].name)
                continue
            for operation in task.operations:
                if not task.owns(operation) or operation.token in self._ignore:
                    continue
                key = (task.token, operation.token)
                if key in self._entries:
                    raise DuplicateOperationError(
                        f"task type {task.name!r} declares operation {operation.token!r} more than once"
                    )
                self._entries[key] = (task, operation)
                self._operations.append((task, operation))
                if operation.token == self._default:
                    self._entries[(task.token, "")] = (task, operation)

    @property
    def default(self):
        """token of the default operation (or None)."""
        return self._default

    @property
    def types(self):
        return tuple(self._types.values())

    @property
    def operations(self):
        """every indexed (task type, operation) pair, in declaration order."""
        return tuple(self._operations)

    def lookup(self, type_token, operation_token="", /):
        """
        return the (task type, operation) pair for the tokens, or None.

        an empty operation token resolves to the type's default operation.
        """
        return self._entries.get((type_token, operation_token or ""))

    def isdefault(self, operation, /):
        return self._default is not None and operation.token == self._default

    def siblings(self, task, operation, /):
        """the other indexed operations of the same task type."""
        return tuple(
            (other, candidate) for other, candidate in self._operations
            if other is task and candidate is not operation
        )

    def __len__(self):
        return len(self._operations)

    def __repr__(self):
        return "task-index(%d operations)" % len(self._operations)


__all__ = (
    "TaskIndex",
)
