"""
Schema types: type references, field and type definitions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

_NAME = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")

# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class SchemaMismatch(Exception):
    """
    Registration-time inconsistency.

    Fatal: a schema that raises this is never compiled.
    """


@dataclass(frozen=True, slots=True)
class NotFound:
    """Lookup miss for a type or (type, field) pair."""

    type_name: str
    field_name: str | None = None

    def __str__(self) -> str:
        if self.field_name is None:
            return f"type {self.type_name!r} not found"
        return f"field {self.type_name}.{self.field_name} not found"


def check_name(name: str, what: str) -> str:
    if not _NAME.match(name):
        raise SchemaMismatch(f"invalid {what} name: {name!r}")
    return name


# ═══════════════════════════════════════════════════════════════════════════════
# TypeRef: Named / List / Non-null
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypeRef:
    """
    Reference to a declared type.

    Named:      TypeRef("Book")
    Non-null:   TypeRef("Book", nullable=False)
    List:       TypeRef(None, of_type=TypeRef("Book"))
    """

    name: str | None
    of_type: TypeRef | None = None
    nullable: bool = True

    def __post_init__(self) -> None:
        if (self.name is None) == (self.of_type is None):
            raise SchemaMismatch(
                "type reference needs exactly one of a name or an item type, "
                f"got name={self.name!r}, of_type={self.of_type!r}"
            )

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def named(self) -> str:
        """Innermost type name: [Book!]! -> Book."""
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        return ref.name or ""

    def __str__(self) -> str:
        inner = f"[{self.of_type}]" if self.of_type is not None else str(self.name)
        return inner if self.nullable else f"{inner}!"


def type_ref(text: str) -> TypeRef:
    """
    Parse SDL type notation.

        type_ref("String")     # nullable String
        type_ref("[Book!]!")   # non-null list of non-null Book
    """
    source = text.strip()
    nullable = True
    if source.endswith("!"):
        nullable = False
        source = source[:-1].rstrip()

    if source.startswith("[") and source.endswith("]"):
        inner = source[1:-1]
        if not inner.strip():
            raise SchemaMismatch(f"malformed type reference: {text!r}")
        return TypeRef(None, of_type=type_ref(inner), nullable=nullable)

    if not _NAME.match(source):
        raise SchemaMismatch(f"malformed type reference: {text!r}")
    return TypeRef(source, nullable=nullable)


def _as_ref(value: TypeRef | str) -> TypeRef:
    return value if isinstance(value, TypeRef) else type_ref(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Definitions
# ═══════════════════════════════════════════════════════════════════════════════


class _Unset(Enum):
    UNSET = auto()

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset.UNSET
"""Marks an argument without a default."""


@dataclass(frozen=True, slots=True)
class ArgumentDefinition:
    """Declared argument: name, input type, optional default."""

    name: str
    type: TypeRef
    default: object = UNSET
    description: str | None = None

    def __post_init__(self) -> None:
        check_name(self.name, "argument")
        object.__setattr__(self, "type", _as_ref(self.type))

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """Declared field: name, return type, ordered arguments."""

    name: str
    type: TypeRef
    arguments: tuple[ArgumentDefinition, ...] = ()
    description: str | None = None

    def __post_init__(self) -> None:
        check_name(self.name, "field")
        object.__setattr__(self, "type", _as_ref(self.type))
        object.__setattr__(self, "arguments", tuple(self.arguments))
        seen: set[str] = set()
        for arg in self.arguments:
            if arg.name in seen:
                raise SchemaMismatch(
                    f"duplicate argument {arg.name!r} on field {self.name!r}"
                )
            seen.add(arg.name)

    def argument(self, name: str) -> ArgumentDefinition | None:
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None


@dataclass(frozen=True, slots=True)
class TypeDefinition:
    """Object type: unique name, ordered fields."""

    name: str
    fields: tuple[FieldDefinition, ...]
    description: str | None = None

    def __post_init__(self) -> None:
        check_name(self.name, "type")
        object.__setattr__(self, "fields", tuple(self.fields))
        seen: set[str] = set()
        for f in self.fields:
            if f.name in seen:
                raise SchemaMismatch(
                    f"duplicate field {f.name!r} on type {self.name!r}"
                )
            seen.add(f.name)

    def field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def argument(
    name: str,
    type: TypeRef | str,
    default: object = UNSET,
    description: str | None = None,
) -> ArgumentDefinition:
    """argument("id", "String")"""
    return ArgumentDefinition(name, _as_ref(type), default, description)


def field(
    name: str,
    type: TypeRef | str,
    *arguments: ArgumentDefinition,
    description: str | None = None,
) -> FieldDefinition:
    """field("bookById", "Book", argument("id", "String"))"""
    return FieldDefinition(name, _as_ref(type), arguments, description)


def object_type(
    name: str,
    *fields: FieldDefinition,
    description: str | None = None,
) -> TypeDefinition:
    """object_type("Book", field("id", "ID"), field("name", "String"))"""
    return TypeDefinition(name, fields, description)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "SchemaMismatch",
    "NotFound",
    "TypeRef",
    "type_ref",
    "UNSET",
    "ArgumentDefinition",
    "FieldDefinition",
    "TypeDefinition",
    "argument",
    "field",
    "object_type",
)
