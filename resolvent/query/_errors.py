"""
Execution errors: field-scoped, carried as values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from resolvent._types import Path

# ═══════════════════════════════════════════════════════════════════════════════
# Field Errors
# ═══════════════════════════════════════════════════════════════════════════════


class FieldErrorKind(Enum):
    """Field error kinds."""
    UNKNOWN_FIELD = auto()
    UNKNOWN_ARGUMENT = auto()
    ARGUMENT_TYPE = auto()
    SHAPE_MISMATCH = auto()
    RESOLVER_FAILURE = auto()
    NULL_VIOLATION = auto()


@dataclass(frozen=True, slots=True)
class FieldError:
    """
    Error scoped to one field.

    The field resolves to None; siblings are unaffected.
    """
    kind: FieldErrorKind
    message: str
    path: Path

    def __str__(self) -> str:
        where = ".".join(str(p) for p in self.path)
        return f"{self.kind.name} at {where}: {self.message}"


# ═══════════════════════════════════════════════════════════════════════════════
# Binder Errors
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class UnknownArgument:
    """Argument not declared on the field."""
    field: str
    argument: str

    @property
    def kind(self) -> FieldErrorKind:
        return FieldErrorKind.UNKNOWN_ARGUMENT

    def __str__(self) -> str:
        return f"unknown argument {self.argument!r} on field {self.field!r}"


@dataclass(frozen=True, slots=True)
class ArgumentTypeError:
    """Argument literal does not coerce to its declared type."""
    field: str
    argument: str
    expected: str
    reason: str

    @property
    def kind(self) -> FieldErrorKind:
        return FieldErrorKind.ARGUMENT_TYPE

    def __str__(self) -> str:
        return (
            f"argument {self.argument!r} on field {self.field!r} "
            f"expected {self.expected}: {self.reason}"
        )


type ArgumentError = UnknownArgument | ArgumentTypeError

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "FieldErrorKind",
    "FieldError",
    "UnknownArgument",
    "ArgumentTypeError",
    "ArgumentError",
)
