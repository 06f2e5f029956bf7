"""
resolvent: field resolution over a typed object graph.

    from resolvent import schema as S   # Types, fields, resolver bindings
    from resolvent import query as Q    # Selections, execution, policies
"""

from resolvent import schema
from resolvent import query
from resolvent._types import (
    Scalar,
    ResultValue,
    Path,
    Resolver,
)

__version__ = "0.1.0"

__all__ = (
    "schema",
    "query",
    "Scalar",
    "ResultValue",
    "Path",
    "Resolver",
)
