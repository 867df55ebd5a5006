r"""
Rym option schemas: named switch specifications and their parser.

Overview
- Specs
  • Option: named, value-bearing switch with one or more aliases (-f/--procfile).
    Required-value options take "--name=value" or "--name value"; optional-value
    options only take the inline form and may appear bare ("--name").
  • Flag: named, presence-only switch (--debug). An inline value is still passed
    through ("--debug=false") so callers may interpret it.

- Decorators
  • @option(...) / @flag(...): build a spec bound to a handler. The handler is
    called with the raw text value (None when the switch carried no value).

- OptionSet
  • Schema of specs keyed by every alias.
  • parse(tokens) invokes handlers left to right and returns the positional
    residue: every token that is not a known switch (or a value consumed by one).
    "--" ends switch parsing; the remaining tokens are residue as-is.
  • describe() renders one line per spec with a hanging description column.

Validation
- Names must match r"--?[^\W\d_](-?[^\W_]+)*" and be unique within a set.
- descr/metavar strings are trimmed; empty strings are rejected.

Quick example
    >>> settings = {}
    >>> @option("-f", "--procfile", descr="task definition file")
    ... def procfile(value):
    ...     settings["procfile"] = value
    >>> OptionSet([procfile]).parse(["-f", "Rymfile", "build"])
    ['build']
"""
import re
from collections import defaultdict, deque

from rich.text import Text

from .faults import FaultCode, MissingParameterError
from .utils import Unset, coalesce, rename

_NAME = re.compile(r"--?[^\W\d_](-?[^\W_]+)*")
_TOKEN = re.compile(r"(?P<name>--?[^\W\d_](-?[^\W_]+)*)(=(?P<value>.*))?", re.DOTALL)


class MissingValueError(MissingParameterError):
    """a required-value option was the last token and received no value."""


class Switch:
    """
    Base of every named switch spec.

    Attributes (read-only)
    - names: tuple of aliases, short ones first.
    - descr: help text or None.
    - callback: handler receiving the raw value (str | None).
    """
    __typename__ = "switch"

    def __init__(self, *names, descr=Unset, callback=Unset):
        if not names:
            raise TypeError(f"{self.__typename__} requires at least one name")
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{self.__typename__} names must be strings")
            if not _NAME.fullmatch(name):
                raise ValueError(f"{self.__typename__} name {name!r} is not a valid switch name")
        if len(set(names)) != len(names):
            raise ValueError(f"{self.__typename__} names must be unique")
        if descr is not Unset:
            if not isinstance(descr, str):
                raise TypeError(f"{self.__typename__} 'descr' must be a string")
            if not (descr := descr.strip()):
                raise ValueError(f"{self.__typename__} 'descr' must be a non-empty string")
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{self.__typename__} callback must be callable")
        self._names = tuple(sorted(names, key=lambda x: (x.startswith("--"), len(x))))
        self._descr = descr
        self._callback = callback

    @property
    def names(self):
        return self._names

    @property
    def descr(self):
        return coalesce(self._descr)

    @property
    def callback(self):
        return coalesce(self._callback)

    def __call__(self, value=None, /):
        if self._callback is Unset:
            return
        return self._callback(value)

    def __repr__(self):
        return "%s(%s)" % (self.__typename__, ", ".join(map(repr, self.names)))


class Option(Switch):
    """
    Value-bearing switch.

    Parameters
    - required: when True (the default) a value must follow, inline or spaced;
      when False only "--name=value" carries a value and a bare "--name" calls
      the handler with None.
    - metavar: label shown in help; defaults to the upper-cased long name.
    """
    __typename__ = "option"

    def __init__(self, *names, descr=Unset, metavar=Unset, required=True, callback=Unset):
        super().__init__(*names, descr=descr, callback=callback)
        if metavar is not Unset:
            if not isinstance(metavar, str):
                raise TypeError("option 'metavar' must be a string")
            if not (metavar := metavar.strip()):
                raise ValueError("option 'metavar' must be a non-empty string")
        self._metavar = coalesce(metavar, self.names[-1].lstrip("-").upper())
        self._required = bool(required)

    @property
    def metavar(self):
        return self._metavar

    @property
    def required(self):
        return self._required


class Flag(Switch):
    """Presence-only switch."""
    __typename__ = "flag"


def option(*names, **options):
    """
    Decorator factory: @option("--name", ...) binds the decorated handler to a new Option.
    """
    @rename("option")
    def wrapper(callback):
        return Option(*names, callback=callback, **options)
    return wrapper


def flag(*names, **options):
    """
    Decorator factory: @flag("--name", ...) binds the decorated handler to a new Flag.
    """
    @rename("flag")
    def wrapper(callback):
        return Flag(*names, callback=callback, **options)
    return wrapper


class OptionSet:
    """
    A schema of switches and the parser applying it to a token list.

    Notes
    - A switch given twice calls its handler twice; the handler decides whether
      the last value wins or values accumulate.
    - Tokens that look like switches but are not declared (and negative numbers
      such as "-5") are left in the residue.
    """

    def __init__(self, switches=()):
        self._switches = {}
        self._specs = []
        for switch in switches:
            self.add(switch)

    def add(self, switch, /):
        if not isinstance(switch, Switch):
            raise TypeError("option set entries must be options or flags")
        for name in switch.names:
            if self._switches.setdefault(name, switch) is not switch:
                raise ValueError(f"switch name {name!r} is already in use")
        self._specs.append(switch)
        return switch

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __contains__(self, name):
        return name in self._switches

    def __getitem__(self, name):
        return self._switches[name]

    def parse(self, tokens, /):
        """
        apply the schema to tokens and return the positional residue.

        behavior
        - '--name=value' → handler(value) for options and flags.
        - '--name' → flags: handler(None); optional options: handler(None);
          required options: the next token is consumed as the value.
        - '--' → stop; the rest is residue.
        - anything else → residue, in order.

        raises
        - MissingValueError: a required option is the last token.
        - whatever a handler raises (conversion faults, typically).
        """
        tokens = deque(tokens)
        residue = []
        while tokens:
            token = tokens.popleft()
            if token == "--":
                residue.extend(tokens)
                break

            match = _TOKEN.fullmatch(token)
            if not match or match["name"] not in self._switches:
                residue.append(token)
                continue

            switch = self._switches[name := match["name"]]
            value = match["value"]
            if isinstance(switch, Option) and switch.required and value is None:
                if not tokens:
                    raise MissingValueError(
                        "option %r requires a value" % name,
                        title="missing option value",
                        code=FaultCode.MISSING_PARAMETER,
                        hint="pass it inline (%s=<value>) or after a space (%s <value>)" % (name, name),
                        switch=switch,
                    )
                value = tokens.popleft()
            switch(value)
        return residue

    def describe(self, *, colorful=False, indent=29):
        """
        render the switch descriptions as rich Text, one spec per line.

        layout
          -f, --procfile=PROCFILE    task definition file
          --work-dir=WORK-DIR        working directory of the task
              (a names column wider than the indent pushes the description
               to the next line)
        """
        styles = defaultdict(str, {
            "option-name": "bold #00E6FF",  # CYAN for options
            "flag-name": "bold #22C55E",  # GREEN for flags
            "metavar": "bold #FFD600",  # AMBER for values
            "argument-description": "#9CA3AF",  # Muted gray
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        lines = []
        for switch in self._specs:
            style = "option-name" if isinstance(switch, Option) else "flag-name"
            section = Text("  ")
            section.append(Text(", ").join(Text(name, styler(style)) for name in switch.names))
            if isinstance(switch, Option):
                metavar = Text(switch.metavar, styler("metavar"))
                section.append(Text.assemble("=", metavar) if switch.required else Text.assemble("[=", metavar, "]"))

            if switch.descr:
                descr = switch.descr.splitlines()
                if len(section) >= indent - 1:
                    section.append("\n").append(" " * indent)
                else:
                    section.append(" " * (indent - len(section)))
                section.append(descr[0], styler("argument-description"))
                for line in descr[1:]:
                    section.append("\n").append(" " * indent).append(line, styler("argument-description"))
            lines.append(section)
        return Text("\n").join(lines)


__all__ = (
    "Switch",
    "Option",
    "Flag",
    "option",
    "flag",
    "OptionSet",
    "MissingValueError",
)
