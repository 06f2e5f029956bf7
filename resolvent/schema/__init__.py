"""
Schema: typed object schema with resolver bindings.

    from resolvent import schema as S

    schema = (
        S.builder()
        .register_type(S.object_type("Query", S.field("bookById", "Book", S.argument("id", "String"))))
        .register_type(S.object_type("Book", S.field("id", "ID"), S.field("name", "String")))
        .register_resolver("Query", "bookById", book_by_id)
        .default_resolver()
        .compile()
    )
"""

from resolvent.schema._types import (
    SchemaMismatch,
    NotFound,
    TypeRef,
    type_ref,
    UNSET,
    ArgumentDefinition,
    FieldDefinition,
    TypeDefinition,
    argument,
    field,
    object_type,
)
from resolvent.schema._scalars import (
    ScalarDefinition,
    String,
    Int,
    Float,
    Boolean,
    ID,
    BUILTIN_SCALARS,
    coerce_input,
)
from resolvent.schema._registry import Schema, property_resolver
from resolvent.schema._builder import SchemaBuilder, builder

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
    "ScalarDefinition",
    "String",
    "Int",
    "Float",
    "Boolean",
    "ID",
    "BUILTIN_SCALARS",
    "coerce_input",
    "Schema",
    "property_resolver",
    "SchemaBuilder",
    "builder",
)
