"""
Rym utilities (small helpers shared by every layer)

Overview
- UnsetType / Unset
  • Sentinel for “value not provided” when None is a legitimate value (a parameter
    default of None, an explicit console of None, ...).

- coalesce(value, default=None)
  • Materialize Unset into a concrete default; None and other falsey values pass.

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables (clean tracebacks and reprs).

- dasherize(identifier)
  • The name transform: identifiers (ReadFile, read_file) to CLI tokens (read-file).

- mglob(pattern)
  • Dotted module globbing ("tasks.**", "pkg.*.tasks") used by the module loader.

Stability
- Names listed in __all__ are supported; everything else may change without notice.
"""
import builtins
import functools
import importlib
import pkgutil
import re
from typing import final


@final
class UnsetType:
    """
    Sentinel type for values that were not provided.

    Characteristics
    - Falsey, but distinct from None, 0 and "".
    - Singleton: UnsetType() always returns the same object.
    - Sealed: subclassing raises TypeError.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is Unset, in which case return default.

    Examples
    - coalesce("rym", "fallback")  -> "rym"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    Assign __name__/__qualname__ to a callable, or build a decorator doing so.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


@functools.cache
def dasherize(identifier, /):
    """
    Convert an identifier into its CLI token.

    Word boundaries
    - case changes: "ReadFile" → "read-file", "HTTPServer" → "http-server",
      "parseV2Header" → "parse-v2-header"
    - separators: "_", "-" and whitespace, collapsed to one hyphen.

    The result is lowercase, never starts or ends with a hyphen, and dasherize()
    is idempotent on tokens, so CLI input can be passed through it safely.
    Identifiers differing only by casing convention collide ("read_file" and
    "ReadFile" both give "read-file").
    """
    if not isinstance(identifier, str):
        raise TypeError("dasherize() argument must be a string")
    token = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", identifier)
    token = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", token)
    return re.sub(r"[_\-\s]+", "-", token).strip("-").lower()


@functools.cache
def _segment_regex(segment):
    """
    translate one dotted-glob segment into a regex fragment that never crosses a dot.

      *      → [^.]*
      ?      → [^.]
      [...]  → character class, [!...] negated
      \\x     → literal x
    """
    parts = []
    index = 0
    while index < len(segment):
        char = segment[index]
        if char == "\\" and index + 1 < len(segment):
            parts.append(re.escape(segment[index + 1]))
            index += 2
            continue
        if char == "*":
            parts.append(r"[^.]*")
        elif char == "?":
            parts.append(r"[^.]")
        elif char == "[":
            start = index + 1
            negated = ""
            if start < len(segment) and segment[start] in "!^":
                negated = "^"
                start += 1
            end = segment.find("]", start)
            if end < 0:
                parts.append(r"\[")
            else:
                parts.append(f"[{negated}{segment[start:end]}]")
                index = end
        else:
            parts.append(re.escape(char))
        index += 1
    return "".join(parts)


@functools.cache
def _pattern_regex(pattern):
    """compile a dotted glob; '**' spans zero or more whole segments."""
    body = ""
    for index, segment in enumerate(pattern.split(".")):
        if segment == "**":
            body += r"(?:\.[A-Za-z_]\w*)*"
        else:
            body += (r"\." if index else "") + _segment_regex(segment)
    return re.compile(body)


def mglob(source, /):
    """
    Expand a dotted module glob into importable module names.

    Rules
    - the pattern must start with a concrete segment, which is imported to
      discover its submodules (an unimportable prefix yields []).
    - a pattern without wildcards is returned as-is: ["tasks"].
    - matches are case-sensitive, unique and sorted.

    Examples
    - "tasks.**"      → tasks and every module below it
    - "tasks.*"       → direct children of tasks
    - "pkg.**.tasks"  → any tasks module under pkg
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    if re.fullmatch(r"(?!\d)\w+(\.(?!\d)\w+)*", source):
        return [source]

    prefixes = []
    for segment in source.split("."):
        if not re.fullmatch(r"(?!\d)\w+", segment):
            break
        prefixes.append(segment)

    if not prefixes:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(prefixes))
    except ImportError:
        return []

    pattern = _pattern_regex(source)
    matches = {prefix} if pattern.fullmatch(prefix) else set()
    for metadata in pkgutil.walk_packages(getattr(package, "__path__", ()), prefix + "."):
        if pattern.fullmatch(metadata.name):
            matches.add(metadata.name)
    return sorted(matches)


Unset = UnsetType()
"""
The “not provided” singleton; see UnsetType.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "dasherize",
    "mglob",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
