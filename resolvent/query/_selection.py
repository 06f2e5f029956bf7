"""
Selection tree: the client's requested shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# ═══════════════════════════════════════════════════════════════════════════════
# SelectionNode
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SelectionNode:
    """
    One selected field.

    `arguments` maps argument name to literal value.
    `selections` is empty for leaf fields.
    """

    name: str
    arguments: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))
    selections: tuple[SelectionNode, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))
        object.__setattr__(self, "selections", tuple(self.selections))


def selection(
    name: str,
    /,
    *children: SelectionNode | str,
    **arguments: object,
) -> SelectionNode:
    """
    Build a selection node.

    Example:
        # bookById(id: "book-1") { id name author { firstName } }
        selection(
            "bookById",
            "id",
            "name",
            selection("author", "firstName"),
            id="book-1",
        )
    """
    return SelectionNode(
        name=name,
        arguments=arguments,
        selections=tuple(
            SelectionNode(c) if isinstance(c, str) else c for c in children
        ),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("SelectionNode", "selection")
