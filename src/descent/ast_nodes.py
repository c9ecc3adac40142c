"""Generic tree nodes built by parsing units."""

from __future__ import annotations

from collections.abc import Iterator

from descent.errors import NodeValueError


class Node:
    """A tagged tree node: kind, label, optional scalar value, children.

    Children are only ever appended. Once a tree is handed to a visitor
    it should be treated as read-only.
    """

    __slots__ = ("kind", "label", "value", "children")

    def __init__(self, kind: int, label: str, value: str | None = None) -> None:
        self.kind = kind
        self.label = label
        self.value = value
        self.children: list[Node] = []

    def add_child(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def add_children(self, *children: Node) -> None:
        self.children.extend(children)

    def value_as_string(self) -> str:
        if self.value is None:
            raise NodeValueError(self.label)
        return self.value

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants, depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def __bool__(self) -> bool:
        # leaves are still nodes
        return True

    def __repr__(self) -> str:
        return (
            f"Node(kind={self.kind}, label={self.label!r}, value={self.value!r}, "
            f"children={len(self.children)})"
        )
