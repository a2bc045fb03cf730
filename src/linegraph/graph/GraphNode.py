"""GraphNode - Node representation for the diagram graph.

This module provides the node data structures:
- Position: Canvas coordinates of a node
- Node: A named entity, identified by its label
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """Canvas coordinates of a node's top-left corner."""

    x: int
    y: int

    def as_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    def __str__(self) -> str:
        return f"{self.x},{self.y}"


@dataclass
class Node:
    """A node in the diagram graph.

    The label is the identity: two lines naming the same label denote
    the same node.

    Attributes:
        id: The node label.
        position: Current canvas position.
        origin_line: Index of the first line that declared this node on
            its own (standalone or positioned), or None when the node is
            only mentioned by edges.
        position_line: Index of the positioned line whose coordinates
            the node carries, or None when its position was placed.
    """

    id: str
    position: Position
    origin_line: int | None = None
    position_line: int | None = None

    @property
    def label(self) -> str:
        return self.id

    @property
    def is_placed(self) -> bool:
        """True if the position came from the placement policy, not the text."""
        return self.position_line is None

    def to_line(self) -> str:
        """Render this node as a positioned line."""
        return f"{self.position.x},{self.position.y},{self.id}"
