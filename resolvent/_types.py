"""
Core types for resolvent.

Re-exports from kungfu/combinators + the value model produced by execution.
"""

from __future__ import annotations

from collections.abc import Callable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# Re-export from combinators
from combinators import NoError

# ═══════════════════════════════════════════════════════════════════════════════
# Result Values
# ═══════════════════════════════════════════════════════════════════════════════

type Scalar = str | int | float | bool
"""Leaf value of a result tree."""

type ResultValue = None | Scalar | dict[str, ResultValue] | list[ResultValue]
"""
Value produced for one field.

None is Null, dict is Object (keys in selection order), list is List.
"""

type Path = tuple[str | int, ...]
"""Response keys and list indices leading to a field."""

# ═══════════════════════════════════════════════════════════════════════════════
# Resolver
# ═══════════════════════════════════════════════════════════════════════════════

type Resolver = Callable[..., object]
"""
Field resolver, called as resolver(parent, **arguments).

May return a value, an awaitable, or a kungfu Result.
"""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Re-exports from combinators
    "NoError",
    # Value model
    "Scalar",
    "ResultValue",
    "Path",
    "Resolver",
)
