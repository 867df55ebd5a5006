"""
Task discovery: import modules by dotted glob and describe the task classes they define.

A class is a task type when it is
- defined in the imported module (re-exports are skipped),
- public (no leading underscore),
- concrete (inspect.isabstract() is false),
- constructible with no arguments,
- and its "module.QualName" matches the type pattern.
"""
import importlib
import inspect
import logging
import re
import sys

from .tasks import TaskType
from .utils import mglob

log = logging.getLogger(__name__)


class LoaderError(ImportError):
    """a task module matched by a pattern failed to import."""


def _constructible(cls):
    try:
        inspect.signature(cls).bind()
    except TypeError:
        return False
    except ValueError:
        # builtins without a signature are not task types
        return False
    return True


def _classes(module, pattern):
    for name, object in vars(module).items():
        if not inspect.isclass(object) or object.__module__ != module.__name__:
            continue
        if name.startswith("_") or inspect.isabstract(object):
            continue
        if not _constructible(object):
            log.debug("skipping %s.%s: constructor takes arguments", module.__name__, name)
            continue
        if not pattern.fullmatch("%s.%s" % (module.__name__, object.__qualname__)):
            continue
        yield object


def load(patterns, /, *, type_pattern=".+", paths=()):
    """
    Import every module matching the dotted globs and return their task types.

    Parameters
    - patterns: module glob patterns (see mglob), e.g. ["tasks.**"].
    - type_pattern: regex matched against "module.QualName" of each class.
    - paths: directories prepended to sys.path before importing.

    Returns
    - list of TaskType, in pattern order, then module order, then definition
      order; a class matched by several patterns appears once.

    Raises
    - LoaderError: a matched module failed to import.
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    pattern = re.compile(type_pattern)

    for path in reversed(tuple(map(str, paths))):
        if path not in sys.path:
            sys.path.insert(0, path)
    importlib.invalidate_caches()

    seen = set()
    types = []
    for source in patterns:
        modules = mglob(source)
        if not modules:
            log.warning("no module matches %r", source)
        for name in modules:
            try:
                module = importlib.import_module(name)
            except Exception as e:
                log.error("unable to import module %r: %s", name, e)
                raise LoaderError(f"unable to import module {name!r}", name=name) from e
            for cls in _classes(module, pattern):
                if cls in seen:
                    continue
                seen.add(cls)
                types.append(TaskType.inspect(cls))
                log.debug("loaded task type %s.%s", name, cls.__qualname__)
    return types


__all__ = (
    "LoaderError",
    "load",
)
