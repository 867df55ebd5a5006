"""
Task base class and the single-type entry point.

Subclassing Task is optional; any public class with a zero-argument constructor
is a task type. Task adds what most task classes end up wanting:

- log: a logger named after the class.
- debug / trace: set by the root flags of Task.run().
- cancellation: replaced by the dispatcher's Cancellation before each operation.
- close(): release hook, called after the operation (hidden from the CLI).
- run(): a complete CLI around one class:

    class Deploy(Task):
        \"\"\"deployment helpers\"\"\"

        def execute(self, environment):
            ...

    if __name__ == "__main__":
        sys.exit(Deploy.run())
"""
import contextlib
import logging
import signal
import sys
import threading
import traceback

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from .config import Settings
from .dispatcher import Cancellation, Runnable, dispatch
from .faults import TaskException, report
from .options import OptionSet, flag
from .tasks import TaskType

log = logging.getLogger(__name__)


@contextlib.contextmanager
def interruptible(cancellation):
    """
    Route the first SIGINT to cancellation.cancel(); the next one interrupts as usual.

    Outside the main thread signals cannot be rewired and this is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield cancellation
        return

    def handler(signum, frame):
        if cancellation.cancelled:
            raise KeyboardInterrupt
        log.warning("interrupted, cancelling (interrupt again to abort)")
        cancellation.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield cancellation
    finally:
        signal.signal(signal.SIGINT, previous)


def configure_logging(debug=False, console=None):
    """route every log record to a rich handler on stderr; DEBUG with debug, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


def render_error(error, console, *, trace=False):
    """
    Render a task failure in red: the message, or the full traceback with trace.

    Exception groups are unfolded so every leaf failure is shown.
    """
    if trace:
        console.print(Text("".join(traceback.format_exception(error)), "red"), soft_wrap=True)
    elif isinstance(error, BaseExceptionGroup):
        for inner in error.exceptions:
            render_error(inner, console)
    elif isinstance(error, TaskException):
        report(error, console)
    else:
        console.print(Text(str(error) or type(error).__name__, "bold red"), soft_wrap=True)


class Task:
    """
    Convenience base class for task types.
    """

    debug = False
    trace = False

    def __init__(self):
        self.log = logging.getLogger(type(self).__qualname__)
        self.cancellation = Cancellation()

    def close(self):
        """release resources held by the task; called after every operation."""

    def report(self, error, console=None):
        """render an error raised while running this task."""
        render_error(error, console or Console(stderr=True), trace=self.trace)

    @classmethod
    def run(cls, argv=None, *, settings=None):
        """
        Run one operation of this class from command-line arguments.

        Root flags
        - --debug: debug logging, and 'debug' set on the instance.
        - --trace: full tracebacks on failure, and 'trace' set on the instance.
        - -h/--help: class description and every operation.
        - --version: __version__ of the module defining the class.

        Returns the exit code: 0 on success, help or resolution faults, 1 when
        the operation raised.
        """
        argv = list(sys.argv[1:] if argv is None else argv)
        settings = settings or Settings()
        state = dict.fromkeys(("debug", "trace", "help", "version"), False)

        def enable(name):
            return lambda value, /: state.__setitem__(name, True)

        options = OptionSet([
            flag("--debug", descr="show debug messages")(enable("debug")),
            flag("--trace", descr="show tracebacks of failures")(enable("trace")),
            flag("-h", "--help", descr="show this help message and exit")(enable("help")),
            flag("--version", descr="show the version and exit")(enable("version")),
        ])

        created = []

        def create():
            instance = cls()
            created.append(instance)
            instance.debug = state["debug"]
            instance.trace = state["trace"]
            return instance

        try:
            tokens = options.parse(argv)
            configure_logging(state["debug"])

            described = TaskType.inspect(cls)
            task = TaskType(described.name, create, described.operations, source=cls, descr=described.descr)

            if state["help"]:
                if task.descr:
                    settings.console.print(Text(task.descr), soft_wrap=True)
                dispatch([task], ["help"], settings, options=options)
                return 0
            if state["version"]:
                module = sys.modules.get(cls.__module__)
                settings.console.print(Text(str(getattr(module, "__version__", "0.0.0"))))
                return 0

            outcome = dispatch([task], tokens, settings, options=options)
            if isinstance(outcome, Runnable):
                with interruptible(outcome.cancellation):
                    outcome()
            return 0
        except Exception as e:
            if created:
                created[-1].report(e)
            else:
                render_error(e, Console(stderr=True), trace=state["trace"])
            return 1


__all__ = (
    "Task",
    "configure_logging",
    "interruptible",
    "render_error",
)
