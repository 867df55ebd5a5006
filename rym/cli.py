"""
The rym command: load task classes from modules and run one operation.

    rym [OPTIONS] [TASK] [SUBTASK] [PARAMETERS]

Root options are read from the task-definition file first (one "name=value" per
line, see read_procfile) and then from the command line, so the command line
wins. File lines that are not root options are skipped with a warning; command
line tokens the root options do not consume are handed to dispatch().
"""
import contextlib
import logging
import os
import sys

from rich.console import Console
from rich.text import Text

from . import __version__
from .app import configure_logging, interruptible, render_error
from .config import Settings, read_procfile
from .dispatcher import Runnable, dispatch
from .faults import TaskException, report
from .loader import load
from .options import OptionSet, flag, option

log = logging.getLogger(__name__)

DEFAULT_MODULES = ("tasks.**",)
DEFAULT_PROCFILE = "Rymfile"


class _State:
    """root option values, filled by the OptionSet handlers."""

    def __init__(self):
        self.debug = False
        self.trace = False
        self.help = False
        self.version = False
        self.modules = []
        self.type_pattern = ".+"
        self.work_dir = None
        self.procfile = DEFAULT_PROCFILE


def _options(state):
    @flag("--debug", descr="show debug messages")
    def debug(value, /):
        state.debug = True

    @flag("--trace", descr="show the traceback when a task fails")
    def trace(value, /):
        state.trace = True

    @option("-m", "--module", metavar="PATTERN", descr="module glob to load tasks from\n(repeatable, default: tasks.**)")
    def module(value, /):
        state.modules.append(value)

    @option("--type-pattern", metavar="REGEX", descr="regex over module.ClassName of loaded tasks")
    def type_pattern(value, /):
        state.type_pattern = value

    @option("--work-dir", metavar="DIR", descr="working directory of the task")
    def work_dir(value, /):
        state.work_dir = value

    @option("-f", "--procfile", descr="task definition file (default: Rymfile)")
    def procfile(value, /):
        state.procfile = value

    @flag("-h", "--help", descr="show this help message and exit")
    def help(value, /):
        state.help = True

    @flag("--version", descr="show the version and exit")
    def version(value, /):
        state.version = True

    return OptionSet([debug, trace, module, type_pattern, work_dir, procfile, help, version])


def _procfile(argv):
    """the -f/--procfile value of argv, looked up before anything else is parsed."""
    state = _State()
    probe = OptionSet([
        option("-f", "--procfile")(lambda value, /: setattr(state, "procfile", value)),
    ])
    with contextlib.suppress(TaskException):
        probe.parse(argv)
    return state.procfile


def main(argv=None, *, settings=None):
    """
    Entry point of the rym command; returns the process exit code.

    - 0: the task ran, help was shown, or the tokens did not resolve.
    - 1: the task raised, loading failed, or a root option was malformed.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    stderr = Console(stderr=True)
    state = _State()
    options = _options(state)

    try:
        ignored = options.parse(read_procfile(procfile := _procfile(argv)))
        tokens = options.parse(argv)
    except TaskException as fault:
        report(fault, stderr)
        return 1

    configure_logging(state.debug, stderr)
    for token in ignored:
        log.warning("ignoring %r in task definition file %r: not a root option", token, procfile)

    settings = settings or Settings()
    if state.version:
        settings.console.print(Text(__version__))
        return 0
    if state.help:
        settings.console.print(options.describe(colorful=settings.console.color_system is not None), soft_wrap=True)
        return 0

    try:
        types = load(state.modules or DEFAULT_MODULES, type_pattern=state.type_pattern, paths=[os.getcwd()])
        log.debug("%d task type(s) loaded", len(types))
        outcome = dispatch(types, tokens, settings, options=options)
        if isinstance(outcome, Runnable):
            with contextlib.chdir(state.work_dir or os.curdir), interruptible(outcome.cancellation):
                outcome()
    except Exception as e:
        render_error(e, stderr, trace=state.trace)
        return 1
    return 0


__all__ = (
    "main",
)
