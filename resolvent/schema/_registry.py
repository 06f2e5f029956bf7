"""
Compiled schema: read-only registry of types, scalars and resolvers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from kungfu import Result, Ok, Error

from resolvent._types import Resolver
from resolvent.schema._types import NotFound, FieldDefinition, TypeDefinition
from resolvent.schema._scalars import ScalarDefinition

# ═══════════════════════════════════════════════════════════════════════════════
# Default Resolver: opt-in same-name property access
# ═══════════════════════════════════════════════════════════════════════════════


def property_resolver(name: str) -> Resolver:
    """
    Resolver reading `name` from the parent value.

    Mappings are read by key, anything else by attribute.
    A missing key or attribute resolves to None.
    """

    def resolve(parent: object, **_: object) -> object:
        if isinstance(parent, Mapping):
            return parent.get(name)
        return getattr(parent, name, None)

    resolve.__name__ = f"property_resolver_{name}"
    return resolve


# ═══════════════════════════════════════════════════════════════════════════════
# Schema
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Schema:
    """
    Read-only schema registry.

    Produced by SchemaBuilder.compile(); safe to share between
    concurrent executions.
    """

    query_type: str
    types: Mapping[str, TypeDefinition]
    scalars: Mapping[str, ScalarDefinition]
    resolvers: Mapping[tuple[str, str], Resolver]
    fields: Mapping[tuple[str, str], FieldDefinition]
    default_resolver: bool = False

    def type_definition(self, name: str) -> Result[TypeDefinition, NotFound]:
        found = self.types.get(name)
        return Ok(found) if found is not None else Error(NotFound(name))

    def field_definition(
        self,
        type_name: str,
        field_name: str,
    ) -> Result[FieldDefinition, NotFound]:
        found = self.fields.get((type_name, field_name))
        if found is None:
            return Error(NotFound(type_name, field_name))
        return Ok(found)

    def resolver_for(
        self,
        type_name: str,
        field_name: str,
    ) -> Result[Resolver, NotFound]:
        """
        Resolver bound to (type, field).

        With the default resolver enabled, every declared field
        without an explicit binding resolves by property access.
        """
        found = self.resolvers.get((type_name, field_name))
        if found is None:
            return Error(NotFound(type_name, field_name))
        return Ok(found)

    def is_object_type(self, name: str) -> bool:
        return name in self.types

    def scalar(self, name: str) -> ScalarDefinition | None:
        return self.scalars.get(name)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Schema", "property_resolver")
