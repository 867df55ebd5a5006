"""
Rym faults (user-facing errors) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing fault, grouped by
  domain so messages and logs stay searchable.
- TaskException: base type carrying a message plus read-only options (title,
  code, hint, program, ...) that renders itself through rich.
- Resolution faults: TaskNotFoundError.
- Binding faults: BindingError and its ArityMismatchError, ConversionError and
  MissingParameterError refinements.
- DuplicateOperationError: a programming error raised while indexing task types.
- report(): render a fault on a console with extra options merged in.

UX
- Lowercase, soft but technical messages; one sentence body, one hint.
- Styles can be overridden by a __styles__ mapping in __main__, codes by a
  __codes__ mapping.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - resolution (2110x): TASK_NOT_FOUND
    - binding (2120x): ARITY_MISMATCH, CONVERSION_FAILED, MISSING_PARAMETER
    - registry (2130x): DUPLICATE_OPERATION
    """
    # --- resolution errors ---
    TASK_NOT_FOUND              = 21101

    # --- binding errors ---
    ARITY_MISMATCH              = 21201
    CONVERSION_FAILED           = 21202
    MISSING_PARAMETER           = 21203

    # --- registry errors ---
    DUPLICATE_OPERATION         = 21301

    def normalize(self):
        """
        return the host-normalized label for this code.

        a __codes__ mapping in __main__ may relabel codes; otherwise the numeric
        value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class TaskException(Exception):
    """
    base class of every fault rym reports to the user.

    options
    - title: short headline ("task not found").
    - code: FaultCode of the fault.
    - hint: one actionable sentence.
    - program: program name shown in the header.
    - colorful: style the rendering (defaults to True).
    any other option is kept for programmatic inspection (tokens, parameter, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message or "")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(self.options.get("program", "rym"), "prog-name"),
            " — ",
            text(code.normalize() if code else "", "code"),
            " | ",
            text(str(self.options.get("title", "error")).title(), "error-title"),
            " ]",
        )
        renders = [header, text(self.message, "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class TaskNotFoundError(TaskException): ...
class BindingError(TaskException): ...
class ArityMismatchError(BindingError): ...
class ConversionError(BindingError): ...
class MissingParameterError(BindingError): ...


class DuplicateOperationError(ValueError):
    """raised while indexing a task type that declares two operations with one token."""

    code = FaultCode.DUPLICATE_OPERATION


def report(fault, console, /, **options):
    """
    render a fault on the given rich console.

    contract
    - fault must implement __rich__ and __replace__ (see TaskException).
    - options are merged into the fault's own options before rendering; the
      console's color support decides the default for 'colorful'.
    """
    if not hasattr(fault, "__rich__") or not hasattr(fault, "__replace__"):
        raise TypeError("report() argument must have a __rich__ and __replace__ methods")
    options.setdefault("colorful", console.color_system is not None)
    console.print(copy.replace(fault, **options), soft_wrap=True)


__all__ = (
    "FaultCode",
    "TaskException",
    "TaskNotFoundError",
    "BindingError",
    "ArityMismatchError",
    "ConversionError",
    "MissingParameterError",
    "DuplicateOperationError",
    "report",
)
