"""
Rym task descriptors: what the dispatcher knows about task types.

What this module provides
- Parameter: name, semantic type, optional default and description, plus the
  text converter used by the binder.
- Operation: a named, parameterized action owned by a task type; knows how to
  invoke itself on an instance with bound values.
- TaskType: name, zero-argument factory and ordered operations.

Two ways to build descriptors
- Introspection: TaskType.inspect(cls) turns every public method of a class into
  an Operation and every parameter into a Parameter (types from annotations,
  descriptions from docstrings and typing.Annotated metadata).
- Registration: TaskType(name, factory, [Operation(name, parameters, invoker)])
  describes task types that have no class worth inspecting.

The dispatcher depends only on the descriptor surface (names, parameters, invoke,
factory), never on inspect itself.
"""
import enum
import inspect
import re
import types
import typing
from inspect import Parameter as Signature

from .utils import Unset, coalesce, dasherize

_TOKEN = re.compile(r"[^\W\d_](-?[^\W_]+)*")
_TRUTHY = frozenset({"1", "true", "yes", "on", "y", "t"})
_FALSY = frozenset({"0", "false", "no", "off", "n", "f"})


def _boolean(text):
    if (lowered := text.strip().lower()) in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError("invalid boolean literal %r" % text)


def _enumeration(kind, text):
    try:
        return kind[text]
    except KeyError:
        pass
    for member in kind:
        if str(member.value) == text:
            return member
    raise ValueError("%r is not a member of %s" % (text, kind.__name__))


def _describe(callback):
    """first paragraph of a docstring, collapsed to one line (None when absent)."""
    doc = inspect.getdoc(callback)
    if not doc:
        return None
    return " ".join(doc.split("\n\n", 1)[0].split()) or None


class Parameter:
    """
    Descriptor of one operation parameter.

    Attributes (read-only)
    - name: identifier as declared ("retry_count").
    - token: CLI token ("retry-count").
    - type: semantic type used for conversion (bool, str, int, float, Enum, ...).
    - default: default value, or Unset for mandatory parameters.
    - descr: help text or None.
    - keyword: True for keyword-only parameters.
    """

    def __init__(self, name, type=str, default=Unset, descr=None, *, keyword=False):
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"parameter name {name!r} must be an identifier")
        if not _TOKEN.fullmatch(dasherize(name)):
            raise ValueError(f"parameter name {name!r} has no switch form (its token must start with a letter)")
        if not callable(type):
            raise TypeError(f"parameter {name!r} type must be callable")
        self._name = name
        self._type = type
        self._default = default
        self._descr = descr
        self._keyword = bool(keyword)

    name = property(lambda self: self._name)
    type = property(lambda self: self._type)
    default = property(lambda self: self._default)
    descr = property(lambda self: self._descr)
    keyword = property(lambda self: self._keyword)

    @property
    def token(self):
        return dasherize(self._name)

    @property
    def mandatory(self):
        return self._default is Unset

    @property
    def boolean(self):
        return self._type is bool

    def convert(self, text, /):
        """
        Convert CLI text to the semantic type.

        Rules
        - str: unchanged.
        - bool: 1/0, true/false, yes/no, on/off (case-insensitive).
        - Enum subclasses: member name first, then member value.
        - anything else: type(text).

        Raises ValueError/TypeError on failure; the binder turns those into
        ConversionError faults.
        """
        if self._type is str:
            return text
        if self._type is bool:
            return _boolean(text)
        if isinstance(self._type, type) and issubclass(self._type, enum.Enum):
            return _enumeration(self._type, text)
        return self._type(text)

    @classmethod
    def inspect(cls, parameter, /):
        """Build a Parameter from an inspect.Parameter (annotations already evaluated)."""
        annotation = None if parameter.annotation is Signature.empty else parameter.annotation
        descr = None
        if typing.get_origin(annotation) is typing.Annotated:
            annotation, *metadata = typing.get_args(annotation)
            descr = next((x for x in metadata if isinstance(x, str)), None)
        if typing.get_origin(annotation) in (typing.Union, types.UnionType):
            # Optional[T] and T | None describe T
            annotation = next((x for x in typing.get_args(annotation) if x is not type(None)), str)

        default = Unset if parameter.default is Signature.empty else parameter.default
        if isinstance(annotation, type):
            kind = annotation
        elif default is not Unset and default is not None:
            kind = type(default)
        else:
            kind = str
        return cls(parameter.name, kind, default, descr, keyword=parameter.kind is Signature.KEYWORD_ONLY)

    def __repr__(self):
        default = "" if self.mandatory else "=%r" % (self._default,)
        return "parameter(%s: %s%s)" % (self._name, getattr(self._type, "__name__", self._type), default)


class Operation:
    """
    Descriptor of one invocable action.

    Parameters
    - name: identifier of the action ("build", "read_file").
    - parameters: ordered Parameter descriptors.
    - invoker: callable(instance, *args, **kwargs) doing the actual call.
    - descr: help text (optional).
    - owner: class declaring the operation; None for registered operations.
    """

    def __init__(self, name, parameters=(), invoker=Unset, descr=None, *, owner=None):
        if not isinstance(name, str) or not name:
            raise ValueError("operation name must be a non-empty string")
        if invoker is not Unset and not callable(invoker):
            raise TypeError(f"operation {name!r} invoker must be callable")
        parameters = tuple(parameters)
        if not all(isinstance(x, Parameter) for x in parameters):
            raise TypeError(f"operation {name!r} parameters must be parameter descriptors")
        if len({x.token for x in parameters}) != len(parameters):
            raise ValueError(f"operation {name!r} declares the same parameter twice")
        self._name = name
        self._parameters = parameters
        self._invoker = coalesce(invoker, lambda instance, *args, **kwargs: getattr(instance, name)(*args, **kwargs))
        self._descr = descr
        self._owner = owner

    name = property(lambda self: self._name)
    parameters = property(lambda self: self._parameters)
    descr = property(lambda self: self._descr)
    owner = property(lambda self: self._owner)

    @property
    def token(self):
        return dasherize(self._name)

    @property
    def mandatory(self):
        return tuple(x for x in self._parameters if x.mandatory)

    def invoke(self, instance, values, /):
        """call the operation on instance; values follow the parameter order."""
        values = tuple(values)
        if len(values) != len(self._parameters):
            raise TypeError(f"operation {self._name!r} takes {len(self._parameters)} values but {len(values)} were given")
        args = []
        kwargs = {}
        for parameter, value in zip(self._parameters, values):
            if parameter.keyword:
                kwargs[parameter.name] = value
            else:
                args.append(value)
        return self._invoker(instance, *args, **kwargs)

    @classmethod
    def inspect(cls, owner, name, function, /):
        """Build an Operation from a function declared (or inherited) by owner."""
        try:
            signature = inspect.signature(function, eval_str=True)
        except NameError:
            signature = inspect.signature(function)
        parameters = []
        for index, parameter in enumerate(signature.parameters.values()):
            if index == 0 and not isinstance(inspect.getattr_static(owner, name), staticmethod):
                continue  # self
            if parameter.kind in (Signature.VAR_POSITIONAL, Signature.VAR_KEYWORD):
                continue
            parameters.append(Parameter.inspect(parameter))
        return cls(name, parameters, descr=_describe(function), owner=owner)

    def __repr__(self):
        return "operation(%s(%s))" % (self._name, ", ".join(x.name for x in self._parameters))


class TaskType:
    """
    Descriptor of a task type.

    Parameters
    - name: type name ("Build", "DatabaseTasks").
    - factory: zero-argument callable producing a fresh instance.
    - operations: ordered Operation descriptors.
    - source: the inspected class, if any (used to tell own-declared operations
      from inherited ones).
    - descr: help text (optional).
    """

    def __init__(self, name, factory, operations=(), *, source=None, descr=None):
        if not isinstance(name, str) or not name:
            raise ValueError("task type name must be a non-empty string")
        if not callable(factory):
            raise TypeError(f"task type {name!r} factory must be callable")
        operations = tuple(operations)
        if not all(isinstance(x, Operation) for x in operations):
            raise TypeError(f"task type {name!r} operations must be operation descriptors")
        self._name = name
        self._factory = factory
        self._operations = operations
        self._source = source
        self._descr = descr

    name = property(lambda self: self._name)
    factory = property(lambda self: self._factory)
    operations = property(lambda self: self._operations)
    source = property(lambda self: self._source)
    descr = property(lambda self: self._descr)

    @property
    def token(self):
        return dasherize(self._name)

    def owns(self, operation, /):
        """True when the operation is declared by this type itself (not inherited)."""
        return operation.owner is None or operation.owner is self._source

    def create(self):
        return self._factory()

    @classmethod
    def inspect(cls, source, /):
        """
        Describe a class: every public function reachable on it becomes an operation.

        Notes
        - Inherited functions are described too (owner is their declaring class);
          the task index keeps only the ones the class declares itself.
        - Properties, classmethods and dunder/private names are skipped.
        """
        if not isinstance(source, type):
            raise TypeError("TaskType.inspect() argument must be a class")
        operations = []
        for name, function in inspect.getmembers(source, inspect.isfunction):
            if name.startswith("_"):
                continue
            owner = next(klass for klass in source.__mro__ if name in vars(klass))
            operations.append(Operation.inspect(owner, name, function))
        operations.sort(key=lambda x: _position(source, x))
        return cls(source.__name__, source, operations, source=source, descr=_describe(source))

    def __repr__(self):
        return "task-type(%s: %s)" % (self._name, ", ".join(x.name for x in self._operations))


def _position(source, operation):
    """declaration order: own methods first, then inherited ones, class by class."""
    return source.__mro__.index(operation.owner), list(vars(operation.owner)).index(operation.name)


__all__ = (
    "Parameter",
    "Operation",
    "TaskType",
)
