"""
Schema builder: fluent registration, validated compile.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, replace
from types import MappingProxyType

import structlog

from resolvent._types import Resolver
from resolvent.schema._types import (
    SchemaMismatch,
    FieldDefinition,
    TypeDefinition,
)
from resolvent.schema._scalars import (
    ScalarDefinition,
    BUILTIN_SCALARS,
    coerce_input,
)
from resolvent.schema._registry import Schema, property_resolver

logger = structlog.get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Signature Check
# ═══════════════════════════════════════════════════════════════════════════════


def _check_signature(type_name: str, fd: FieldDefinition, fn: Resolver) -> None:
    """Resolver must accept (parent, **declared_arguments)."""
    if not callable(fn):
        raise SchemaMismatch(f"resolver for {type_name}.{fd.name} is not callable")
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins and some C callables are not introspectable
        return
    try:
        sig.bind(None, **{arg.name: None for arg in fd.arguments})
    except TypeError as e:
        raise SchemaMismatch(
            f"resolver {getattr(fn, '__name__', fn)!r} for {type_name}.{fd.name} "
            f"cannot be called as (parent, {', '.join(a.name for a in fd.arguments)}): {e}"
        ) from e


# ═══════════════════════════════════════════════════════════════════════════════
# SchemaBuilder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class SchemaBuilder:
    """
    Immutable schema builder. Every call returns a new builder.

    Example:
        schema = (
            S.builder()
            .register_type(S.object_type("Query", S.field("bookById", "Book", S.argument("id", "String"))))
            .register_type(S.object_type("Book", S.field("id", "ID"), S.field("name", "String")))
            .register_resolver("Query", "bookById", book_by_id)
            .default_resolver()
            .compile()
        )
    """

    _query_type: str = "Query"
    _types: tuple[TypeDefinition, ...] = ()
    _scalars: tuple[ScalarDefinition, ...] = BUILTIN_SCALARS
    _resolvers: tuple[tuple[str, str, Resolver], ...] = ()
    _default_resolver: bool = False

    def _type(self, name: str) -> TypeDefinition | None:
        for t in self._types:
            if t.name == name:
                return t
        return None

    def _scalar(self, name: str) -> ScalarDefinition | None:
        for s in self._scalars:
            if s.name == name:
                return s
        return None

    def register_type(self, definition: TypeDefinition) -> SchemaBuilder:
        """Register an object type."""
        if self._type(definition.name) is not None:
            raise SchemaMismatch(f"type {definition.name!r} already registered")
        if self._scalar(definition.name) is not None:
            raise SchemaMismatch(f"type {definition.name!r} clashes with a scalar")
        return replace(self, _types=(*self._types, definition))

    def register_scalar(self, definition: ScalarDefinition) -> SchemaBuilder:
        """Register a custom scalar."""
        if self._scalar(definition.name) is not None:
            raise SchemaMismatch(f"scalar {definition.name!r} already registered")
        if self._type(definition.name) is not None:
            raise SchemaMismatch(f"scalar {definition.name!r} clashes with a type")
        return replace(self, _scalars=(*self._scalars, definition))

    def register_resolver(
        self,
        type_name: str,
        field_name: str,
        fn: Resolver,
    ) -> SchemaBuilder:
        """
        Bind a resolver to (type, field).

        The type must already be registered and declare the field.
        Each pair is bound at most once.
        """
        definition = self._type(type_name)
        if definition is None:
            raise SchemaMismatch(
                f"cannot bind {type_name}.{field_name}: type {type_name!r} not registered"
            )
        fd = definition.field(field_name)
        if fd is None:
            raise SchemaMismatch(
                f"cannot bind {type_name}.{field_name}: "
                f"type {type_name!r} has no field {field_name!r}"
            )
        if any(t == type_name and f == field_name for t, f, _ in self._resolvers):
            raise SchemaMismatch(f"resolver for {type_name}.{field_name} already bound")
        _check_signature(type_name, fd, fn)
        return replace(self, _resolvers=(*self._resolvers, (type_name, field_name, fn)))

    def default_resolver(self, enabled: bool = True) -> SchemaBuilder:
        """Resolve unbound fields by same-name property access."""
        return replace(self, _default_resolver=enabled)

    def query_type(self, name: str) -> SchemaBuilder:
        """Root type name (default: Query)."""
        return replace(self, _query_type=name)

    def compile(self) -> Schema:
        """
        Validate and freeze.

        Raises SchemaMismatch if any type reference, argument type or
        argument default is inconsistent.
        """
        types = {t.name: t for t in self._types}
        scalars = {s.name: s for s in self._scalars}

        if self._query_type not in types:
            raise SchemaMismatch(f"query type {self._query_type!r} not registered")

        fields: dict[tuple[str, str], FieldDefinition] = {}
        for t in self._types:
            for fd in t.fields:
                where = f"{t.name}.{fd.name}"
                if fd.type.named not in types and fd.type.named not in scalars:
                    raise SchemaMismatch(f"{where}: unknown type {fd.type.named!r}")
                for arg in fd.arguments:
                    if arg.type.named not in scalars:
                        raise SchemaMismatch(
                            f"{where}({arg.name}): argument type {arg.type} is not a scalar"
                        )
                    if arg.has_default:
                        try:
                            coerce_input(arg.type, arg.default, scalars)
                        except Exception as e:
                            raise SchemaMismatch(
                                f"{where}({arg.name}): invalid default {arg.default!r}: {e}"
                            ) from e
                fields[(t.name, fd.name)] = fd

        resolvers: dict[tuple[str, str], Resolver] = {
            (type_name, field_name): fn for type_name, field_name, fn in self._resolvers
        }
        if self._default_resolver:
            for key in fields:
                resolvers.setdefault(key, property_resolver(key[1]))

        logger.debug(
            "schema_compiled",
            query_type=self._query_type,
            types=len(types),
            scalars=len(scalars),
            resolvers=len(self._resolvers),
            default_resolver=self._default_resolver,
        )

        return Schema(
            query_type=self._query_type,
            types=MappingProxyType(types),
            scalars=MappingProxyType(scalars),
            resolvers=MappingProxyType(resolvers),
            fields=MappingProxyType(fields),
            default_resolver=self._default_resolver,
        )


def builder(query_type: str = "Query") -> SchemaBuilder:
    """Create schema builder: builder().register_type(...).compile()"""
    return SchemaBuilder(_query_type=query_type)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("SchemaBuilder", "builder")
