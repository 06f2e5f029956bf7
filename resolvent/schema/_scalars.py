"""
Scalar types: input coercion and output serialization.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from resolvent._types import Scalar
from resolvent.schema._types import TypeRef

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

# ═══════════════════════════════════════════════════════════════════════════════
# ScalarDefinition
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ScalarDefinition:
    """
    Leaf type.

    parse: argument literal -> value passed to resolvers.
    serialize: resolver output -> value placed in the result.
    Both raise when the value does not fit; the executor reports the
    exception as a field error (ARGUMENT_TYPE or SHAPE_MISMATCH).

    Example:
        Date = ScalarDefinition(
            "Date",
            parse=lambda v: date.fromisoformat(v),
            serialize=lambda d: d.isoformat(),
        )
    """

    name: str
    parse: Callable[[object], object]
    serialize: Callable[[object], Scalar]
    description: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Built-ins
# ═══════════════════════════════════════════════════════════════════════════════


def _parse_string(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"String cannot represent a non-string value: {value!r}")
    return value


def _serialize_string(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise TypeError(f"String cannot represent value: {value!r}")


def _check_int(value: int) -> int:
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"Int cannot represent non 32-bit signed integer: {value!r}")
    return value


def _parse_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Int cannot represent non-integer value: {value!r}")
    return _check_int(value)


def _serialize_int(value: object) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return _parse_int(value)


def _parse_float(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Float cannot represent non numeric value: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Float cannot represent non-finite value: {value!r}")
    return float(value)


def _parse_boolean(value: object) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Boolean cannot represent a non boolean value: {value!r}")
    return value


def _parse_id(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"ID cannot represent value: {value!r}")


String = ScalarDefinition("String", _parse_string, _serialize_string)
Int = ScalarDefinition("Int", _parse_int, _serialize_int)
Float = ScalarDefinition("Float", _parse_float, _parse_float)
Boolean = ScalarDefinition("Boolean", _parse_boolean, _parse_boolean)
ID = ScalarDefinition("ID", _parse_id, _parse_id)

BUILTIN_SCALARS: tuple[ScalarDefinition, ...] = (String, Int, Float, Boolean, ID)

# ═══════════════════════════════════════════════════════════════════════════════
# Input Coercion
# ═══════════════════════════════════════════════════════════════════════════════


def coerce_input(
    ref: TypeRef,
    value: object,
    scalars: Mapping[str, ScalarDefinition],
) -> object:
    """
    Coerce an argument literal to the declared input type.

    A single value given for a list type is wrapped into a one-item list.
    Raises TypeError or ValueError when the value does not fit.
    """
    if value is None:
        if not ref.nullable:
            raise TypeError(f"expected non-null {ref}, got null")
        return None

    if ref.of_type is not None:
        items = value if isinstance(value, (list, tuple)) else [value]
        return [coerce_input(ref.of_type, item, scalars) for item in items]

    scalar = scalars.get(ref.named)
    if scalar is None:
        raise TypeError(f"{ref.named} is not an input type")
    return scalar.parse(value)

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ScalarDefinition",
    "String",
    "Int",
    "Float",
    "Boolean",
    "ID",
    "BUILTIN_SCALARS",
    "coerce_input",
)
