"""
Rym dispatcher: from an argument vector to exactly one resolution outcome.

States
    start → help-check → type-select → operation-select → bind
          → runnable | not-found | binding-failed | help-requested

- help-check: blank tokens are dropped; an empty vector or a leading "help"
  marks help as requested ("help" is consumed) and resolution continues so
  "help build clean" can describe one operation.
- type-select: the next token selects the task type.
- operation-select: the next token is only peeked; an exact operation match
  consumes it, otherwise the type's default operation is used and the token
  stays for the binder (default operations take positionals right after the
  type token).
- help requested: long help for the resolved operation, or the short listing.
- nothing resolved: the not-found fault is reported.
- bind failure: long help of the operation, then the binding fault.
- success: a Runnable, which creates a fresh task instance only when called.

Outcomes are plain values; the only side effect of dispatch() is help and
fault output on settings.console. Every call builds its own index and its own
cancellation, so calls never share state.
"""
import contextlib
import logging
import threading

from .binder import bind
from .config import Settings
from .faults import BindingError, FaultCode, TaskNotFoundError, report
from .help import HelpRenderer
from .index import TaskIndex
from .utils import dasherize

log = logging.getLogger(__name__)


class Cancellation:
    """
    Observable cancellation flag handed to task instances.

    The dispatcher creates one per dispatch; whoever supervises the run (the
    CLI's SIGINT handler, a test) calls cancel(). Tasks poll 'cancelled' or
    block on wait(); rym itself never reacts to it.
    """

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self):
        return self._event.is_set()

    def cancel(self):
        self._event.set()

    def wait(self, timeout=None):
        """block until cancelled (or timeout); True when cancelled."""
        return self._event.wait(timeout)

    def __bool__(self):
        return self.cancelled

    def __repr__(self):
        return "cancellation(%s)" % ("cancelled" if self.cancelled else "active")


class Outcome:
    """Base of the four terminal results of dispatch()."""
    __typename__ = "outcome"

    def __repr__(self):
        return "%s(%s)" % (self.__typename__, ", ".join("%s=%r" % item for item in self.__rich_repr__()))

    def __rich_repr__(self):
        yield from ()


class Runnable(Outcome):
    """
    A resolved and bound operation, ready to run.

    Calling it
    - creates a fresh instance through the task type's factory,
    - hands it the cancellation (instances exposing a 'cancellation' attribute),
    - invokes the operation with the bound values,
    - releases the instance afterwards, also when the operation raises:
      context managers are exited, objects with a close() method are closed.

    The operation's return value is returned; its exceptions propagate as-is.
    """
    __typename__ = "runnable"

    def __init__(self, task, operation, values, cancellation):
        self.task = task
        self.operation = operation
        self.values = tuple(values)
        self.cancellation = cancellation

    def __call__(self):
        instance = self.task.create()
        with contextlib.ExitStack() as stack:
            if hasattr(instance, "__enter__") and hasattr(instance, "__exit__"):
                stack.enter_context(instance)
            elif callable(getattr(instance, "close", None)):
                stack.callback(instance.close)
            if hasattr(instance, "cancellation"):
                instance.cancellation = self.cancellation
            log.debug("invoking %s %s with %r", self.task.token, self.operation.token, self.values)
            return self.operation.invoke(instance, self.values)

    def __rich_repr__(self):
        yield "task", self.task.name
        yield "operation", self.operation.name
        yield "values", self.values


class HelpRequested(Outcome):
    """Help was printed; target is the described (task, operation) pair or None."""
    __typename__ = "help-requested"

    def __init__(self, target=None):
        self.target = target

    def __rich_repr__(self):
        yield "target", None if self.target is None else tuple(x.name for x in self.target)


class NotFound(Outcome):
    """No operation matched; 'fault' carries the user-facing message."""
    __typename__ = "not-found"

    def __init__(self, tokens, program, fault):
        self.tokens = tuple(tokens)
        self.program = program
        self.fault = fault

    @property
    def message(self):
        return str(self.fault)

    def __rich_repr__(self):
        yield "tokens", self.tokens
        yield "program", self.program


class BindingFailed(Outcome):
    """The operation resolved but its arguments did not bind."""
    __typename__ = "binding-failed"

    def __init__(self, task, operation, fault):
        self.task = task
        self.operation = operation
        self.fault = fault

    @property
    def reason(self):
        return type(self.fault)

    @property
    def message(self):
        return str(self.fault)

    def __rich_repr__(self):
        yield "operation", self.operation.name
        yield "reason", self.reason.__name__


def _consume(tokens):
    return tokens.pop(0) if tokens else None


def dispatch(types, tokens, settings=None, /, *, options=None):
    """
    Resolve tokens against task types.

    Parameters
    - types: iterable of TaskType descriptors.
    - tokens: the argument vector (not modified; a copy is consumed).
    - settings: Settings (program name, default operation, hidden operations,
      console); a default Settings() when omitted.
    - options: root OptionSet listed by the short help.

    Returns
    - exactly one of Runnable, HelpRequested, NotFound, BindingFailed.

    Raises
    - DuplicateOperationError when a task type declares an operation twice.
    """
    settings = settings or Settings()
    index = TaskIndex(types, default=settings.default, ignore=settings.ignore)
    renderer = HelpRenderer(index, settings, options=options)

    tokens = [token for token in tokens if token and token.strip()]
    origin = tuple(tokens)

    helping = (tokens[0] if tokens else "help") == "help"
    if helping:
        _consume(tokens)

    target = None
    selector = _consume(tokens)
    if selector is not None:
        type_token = dasherize(selector)
        peeked = dasherize(tokens[0]) if tokens and not tokens[0].startswith("-") else ""
        target = index.lookup(type_token, peeked) if peeked else None
        if target is None:
            target = index.lookup(type_token)
        if target is not None and peeked and target[1].token == peeked:
            _consume(tokens)
    log.debug("resolved %r to %r (help=%s)", origin, target, helping)

    if helping:
        if target is None:
            renderer.short()
        else:
            renderer.long(*target)
        return HelpRequested(target)

    if target is None:
        fault = TaskNotFoundError(
            "task %s not found, try '%s help' to show all possible tasks" % (" ".join(origin), settings.program),
            title="task not found",
            code=FaultCode.TASK_NOT_FOUND,
            hint="run '%s help' to list every task" % settings.program,
            tokens=origin,
        )
        report(fault, settings.console, program=settings.program)
        return NotFound(origin, settings.program, fault)

    task, operation = target
    try:
        values = bind(operation, tokens)
    except BindingError as fault:
        renderer.long(task, operation)
        report(fault, settings.console, program=settings.program)
        return BindingFailed(task, operation, fault)

    return Runnable(task, operation, values, Cancellation())


__all__ = (
    "Cancellation",
    "Outcome",
    "Runnable",
    "HelpRequested",
    "NotFound",
    "BindingFailed",
    "dispatch",
)
