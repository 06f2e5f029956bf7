"""
Argument binder: match selection literals to declared arguments.
"""

from __future__ import annotations

from collections.abc import Mapping

from kungfu import Result, Ok, Error

from resolvent.schema import FieldDefinition, ScalarDefinition, coerce_input
from resolvent.query._errors import (
    ArgumentError,
    ArgumentTypeError,
    UnknownArgument,
)


def bind_arguments(
    fd: FieldDefinition,
    literals: Mapping[str, object],
    scalars: Mapping[str, ScalarDefinition],
) -> Result[dict[str, object], ArgumentError]:
    """
    Produce resolver keyword arguments for one field.

    - Every declared argument is bound, in declaration order.
    - Omitted arguments take their default, else None.
    - Literals are coerced to the declared type.

    Example:
        match bind_arguments(fd, {"id": "book-1"}, schema.scalars):
            case Ok(kwargs):
                resolver(parent, **kwargs)
            case Error(e):
                ...
    """
    for name in literals:
        if fd.argument(name) is None:
            return Error(UnknownArgument(fd.name, name))

    bound: dict[str, object] = {}
    for arg in fd.arguments:
        if arg.name in literals:
            value = literals[arg.name]
        elif arg.has_default:
            value = arg.default
        else:
            value = None

        try:
            bound[arg.name] = coerce_input(arg.type, value, scalars)
        except Exception as e:
            # Custom scalar parsers may raise anything (decimal.InvalidOperation, ...)
            reason = str(e) or type(e).__name__
            return Error(ArgumentTypeError(fd.name, arg.name, str(arg.type), reason))

    return Ok(bound)


__all__ = ("bind_arguments",)
