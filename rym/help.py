"""
Help rendering: the short listing of every task and the long form of one operation.

Short form
    Usage: [OPTIONS] [TASK] [SUBTASK] [PARAMETERS]
    For detail information about task - 'rym help {TASK} [SUBTASK]'
    Options:
      --debug                    ...
    Tasks:
      rym help [TASK] [SUBTASK] # show details information about task or subtask
      rym build {target}  # build one target        ← default operation, token omitted
      rym build clean  # remove build output
    Parameters:
      ...

Long form
    the operation line, its switches, and (for a default operation) its siblings.

Lines are printed with wrapping disabled (soft_wrap) so one operation is always
exactly one line of output.
"""
from collections import defaultdict

from rich.text import Text

from .binder import schema
from .options import OptionSet

_HEADER = (
    "Usage: [OPTIONS] [TASK] [SUBTASK] [PARAMETERS]\n"
    "For detail information about task - '{program} help {{TASK}} [SUBTASK]'\n"
    "Options:"
)
_TASKS = (
    "Tasks:\n"
    "  {program} help [TASK] [SUBTASK] # show details information about task or subtask"
)
_FOOTER = (
    "Parameters:\n"
    "  task accepts parameters in forms described below:\n"
    "    positional - TASK PARAMETER1 PARAMETER2\n"
    "    named - TASK --PARAMETER-NAME1=PARAMETER1 --PARAMETER-NAME2=PARAMETER2\n"
    "    or mixed TASK --PARAMETER-NAME1=PARAMETER1 PARAMETER2\n"
    "    value in curly braces is mandatory - {PARAMETER1}\n"
    "    value in square braces is optional - [PARAMETER1]"
)


class HelpRenderer:
    """
    Render help for an index of task types.

    Parameters
    - index: TaskIndex to describe.
    - settings: Settings (program name, console).
    - options: root OptionSet whose switches head the short form.

    Palette keys (override with __styles__ in __main__)
    - program-name, task-name, operation-name, metavar, description, section
    """

    def __init__(self, index, settings, /, *, options=None):
        self._index = index
        self._settings = settings
        self._options = options if options is not None else OptionSet()

    @property
    def colorful(self):
        return self._settings.console.color_system is not None

    def _styler(self):
        styles = defaultdict(str, {
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "task-name": "bold #36C5F0",  # SKY-BLUE tasks
            "operation-name": "bold #00E6FF",  # CYAN operations
            "metavar": "bold #FFD600",  # AMBER for parameters
            "description": "#9CA3AF",  # Muted gray
            "section": "bold #FFFFFF",  # Pure white headers
        } | getattr(__import__("__main__"), "__styles__", {}))
        return lambda style: styles[style] if self.colorful else ""

    def line(self, task, operation, /):
        """
        one operation as a single line of Text:
          <program> <type> [<operation>] {mandatory}...  # description
        """
        styler = self._styler()
        line = Text("  ")
        line.append(self._settings.program, styler("program-name"))
        line.append(" ").append(task.token, styler("task-name"))
        if not self._index.isdefault(operation):
            line.append(" ").append(operation.token, styler("operation-name"))
        for parameter in operation.mandatory:
            line.append(" ").append("{%s}" % parameter.name, styler("metavar"))
        if operation.descr:
            line.append("  # ").append(operation.descr, styler("description"))
        return line

    def _print(self, renderable):
        self._settings.console.print(renderable, soft_wrap=True, highlight=False)

    def short(self):
        """print every indexed operation, framed by the usage header and footer."""
        styler = self._styler()
        program = self._settings.program
        self._print(Text(_HEADER.format(program=program), styler("section")))
        if len(self._options):
            self._print(self._options.describe(colorful=self.colorful))
        self._print(Text(_TASKS.format(program=program)))
        for task, operation in self._index.operations:
            self._print(self.line(task, operation))
        self._print(Text(_FOOTER))

    def long(self, task, operation, /):
        """print one operation, its switches and, for a default operation, its siblings."""
        self._print(self.line(task, operation))
        if operation.parameters:
            options = schema(operation, [None] * len(operation.parameters))
            self._print(options.describe(colorful=self.colorful))
        if self._index.isdefault(operation):
            for other, sibling in self._index.siblings(task, operation):
                self._print(self.line(other, sibling))


__all__ = (
    "HelpRenderer",
)
