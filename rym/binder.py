"""
Parameter binding: from a residual token list to an operation's argument values.

Algorithm
1. schema: one switch per parameter, "--<token>"; booleans are flags, parameters
   with a default take an optional inline value, mandatory ones require a value.
2. parse: defaults are pre-seeded (mandatory booleans with False), named switches
   overwrite them, everything else is the positional residue.
3. the unfilled set: mandatory, non-boolean parameters still unset, in order.
4. name/value pairs: only while the residue is longer than the unfilled set, a
   residue token naming an unfilled parameter binds the token after it.
5. arity: the residue must be exactly as long as the unfilled set.
6. assignment: residue values fill the unfilled set in order, converted to each
   parameter's type.
7. a mandatory parameter still unset is a missing parameter.
"""
import logging

from .faults import ArityMismatchError, ConversionError, FaultCode, MissingParameterError
from .options import Flag, Option, OptionSet
from .utils import Unset

log = logging.getLogger(__name__)


def _convert(operation, parameter, text):
    try:
        return parameter.convert(text)
    except (ValueError, TypeError, LookupError) as e:
        raise ConversionError(
            "cannot convert %r to %s for parameter %r of %r" % (
                text, getattr(parameter.type, "__name__", parameter.type), parameter.name, operation.token
            ),
            title="conversion failed",
            code=FaultCode.CONVERSION_FAILED,
            hint="pass a valid %s value for --%s" % (getattr(parameter.type, "__name__", "text"), parameter.token),
            parameter=parameter,
            token=text,
        ) from e


def schema(operation, values, /):
    """
    Build the option schema of an operation, writing parsed values into 'values'.

    'values' is a list aligned with operation.parameters; handlers convert and
    store at the parameter's index. The schema is also what long help describes.
    """
    options = OptionSet()
    for index, parameter in enumerate(operation.parameters):
        def store(value, /, index=index, parameter=parameter):
            if parameter.boolean:
                values[index] = True if value is None else _convert(operation, parameter, value)
            elif value is not None:
                values[index] = _convert(operation, parameter, value)

        descr = parameter.descr or ""
        if not parameter.mandatory and not parameter.boolean:
            descr = ("%s (default: %r)" % (descr, parameter.default)).strip()

        if parameter.boolean:
            switch = Flag("--" + parameter.token, descr=descr or Unset, callback=store)
        else:
            switch = Option(
                "--" + parameter.token,
                descr=descr or Unset,
                required=parameter.mandatory,
                callback=store,
            )
        options.add(switch)
    return options


def bind(operation, tokens, /):
    """
    Bind tokens to the operation's parameters.

    Returns
    - tuple of values aligned with operation.parameters.

    Raises
    - ArityMismatchError: residue and unfilled mandatory parameters differ in count.
    - ConversionError: a value does not convert to its parameter's type.
    - MissingParameterError: a mandatory parameter stayed unset (including a
      required switch given without a value).
    """
    parameters = operation.parameters
    values = [False if x.boolean and x.mandatory else x.default for x in parameters]

    residue = schema(operation, values).parse(tokens)
    unfilled = [
        index for index, parameter in enumerate(parameters)
        if parameter.mandatory and not parameter.boolean and values[index] is Unset
    ]

    if len(residue) > len(unfilled):
        residue = _pairs(operation, values, unfilled, residue)

    if len(residue) != len(unfilled):
        names = " ".join("{%s}" % parameters[index].token for index in unfilled) or "nothing"
        raise ArityMismatchError(
            "%r expects %d positional value%s but %d %s given" % (
                operation.token,
                len(unfilled), "" if len(unfilled) == 1 else "s",
                len(residue), "was" if len(residue) == 1 else "were",
            ),
            title="arity mismatch",
            code=FaultCode.ARITY_MISMATCH,
            hint="positional values fill %s, in that order" % names,
            expected=len(unfilled),
            given=len(residue),
            residue=tuple(residue),
        )

    for index, text in zip(unfilled, residue):
        values[index] = _convert(operation, parameters[index], text)

    for index, parameter in enumerate(parameters):
        if parameter.mandatory and values[index] is Unset:
            raise MissingParameterError(
                "required parameter %r of %r was not set" % (parameter.name, operation.token),
                title="missing parameter",
                code=FaultCode.MISSING_PARAMETER,
                hint="pass it positionally or as --%s=<value>" % parameter.token,
                parameter=parameter,
            )

    log.debug("bound %s to %r", operation.token, values)
    return tuple(values)


def _pairs(operation, values, unfilled, residue):
    """bind 'name value' pairs found in the residue; returns the remaining residue."""
    tokens = {operation.parameters[index].token: index for index in unfilled}
    remaining = []
    position = 0
    while position < len(residue):
        token = residue[position]
        excess = len(remaining) + (len(residue) - position) - len(unfilled)
        if excess > 0 and token in tokens and position + 1 < len(residue):
            index = tokens.pop(token)
            values[index] = _convert(operation, operation.parameters[index], residue[position + 1])
            unfilled.remove(index)
            position += 2
            continue
        remaining.append(token)
        position += 1
    return remaining


__all__ = (
    "schema",
    "bind",
)
