"""
Run configuration.

- Settings: the explicit knobs of one dispatch (program name, default operation,
  hidden operations, output console). Passed around instead of process globals.
- read_procfile(): the task-definition file, turned into leading root options.

Host overrides (cosmetic only, looked up in __main__)
- __prog__: program name used in messages.
- __styles__: rich style overrides for help and fault rendering.
- __codes__: relabeled fault codes.
"""
import logging
import os.path
import re
import sys

from rich.console import Console

from .utils import Unset, coalesce

log = logging.getLogger(__name__)

_COMMENT = re.compile(r"^\s*#")


def progname():
    """__prog__ of __main__ when defined, else the lowercased stem of sys.argv[0]."""
    name = getattr(__import__("__main__"), "__prog__", Unset)
    if name is Unset:
        name = os.path.splitext(os.path.basename(sys.argv[0] or "rym"))[0].lower()
    return name or "rym"


class Settings:
    """
    Settings of a dispatch.

    Parameters
    - program: name shown in help and fault messages (see progname()).
    - default: default operation name; None disables the fallback.
    - ignore: operation names never exposed on the command line.
    - console: rich Console receiving help and fault output.
    """

    def __init__(self, program=Unset, default="execute", ignore=("close",), console=Unset):
        if default is not None and not isinstance(default, str):
            raise TypeError("settings 'default' must be a string or None")
        if isinstance(ignore, str):
            raise TypeError("settings 'ignore' must be an iterable of names")
        self._program = program
        self._default = default
        self._ignore = tuple(ignore)
        self._console = console

    @property
    def program(self):
        return coalesce(self._program, None) or progname()

    @property
    def default(self):
        return self._default

    @property
    def ignore(self):
        return self._ignore

    @property
    def console(self):
        if self._console is Unset:
            self._console = Console()
        return self._console

    def __repr__(self):
        return "settings(program=%r, default=%r, ignore=%r)" % (self.program, self._default, self._ignore)


def read_procfile(path, /):
    """
    Read a task-definition file into root option tokens.

    Every line that is neither blank nor a comment (^\\s*#) becomes "--<line>",
    so "module=build.tasks" reads as --module=build.tasks. A missing file reads
    as no options.
    """
    try:
        with open(path, encoding="utf-8") as file:
            lines = file.read().splitlines()
    except FileNotFoundError:
        log.debug("task definition file %r not found", path)
        return []
    tokens = ["--" + line.strip() for line in lines if line.strip() and not _COMMENT.match(line)]
    log.debug("task definition file %r: %r", path, tokens)
    return tokens


__all__ = (
    "Settings",
    "progname",
    "read_procfile",
)
