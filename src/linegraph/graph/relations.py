"""Relations - Anchors, edge styles and edges.

This module defines how relationships attach to nodes:
- Anchor: Side of a node an edge attaches to
- EdgeStyle: Connector spelling and the anchor pair it encodes
- Edge: A directed edge between two node labels
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Anchor(Enum):
    """Side of a node that an edge visually attaches to."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def coerce(cls, value: Anchor | str) -> Anchor:
        """Accept an Anchor or its name/value in any case.

        Raises:
            ValueError: If the string names no anchor.
        """
        if isinstance(value, Anchor):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown anchor: {value!r}") from None


class EdgeStyle(Enum):
    """Connector spellings of the line grammar.

    Each style fixes the (source, target) anchor pair:
    - RIGHT_LEFT (``->``): source right side to target left side
    - BOTTOM_TOP (``-}``): source bottom to target top
    """

    RIGHT_LEFT = "->"
    BOTTOM_TOP = "-}"

    @property
    def token(self) -> str:
        """Canonical connector token written into text."""
        return self.value

    @property
    def anchors(self) -> tuple[Anchor, Anchor]:
        """The (source, target) anchor pair this style encodes."""
        if self is EdgeStyle.BOTTOM_TOP:
            return Anchor.BOTTOM, Anchor.TOP
        return Anchor.RIGHT, Anchor.LEFT

    @classmethod
    def from_anchors(cls, source_anchor: Anchor | str, target_anchor: Anchor | str) -> EdgeStyle:
        """Map an anchor pair onto a connector style.

        (bottom, top) gives ``-}``; every other pair, including
        (right, left) and (left, right), gives ``->``.
        """
        pair = (Anchor.coerce(source_anchor), Anchor.coerce(target_anchor))
        if pair == (Anchor.BOTTOM, Anchor.TOP):
            return cls.BOTTOM_TOP
        return cls.RIGHT_LEFT


def edge_id(source_id: str, target_id: str, occurrence: int = 1) -> str:
    """Build the synthetic id of an edge.

    The first declaration of a pair is ``"A->B"``; repeats are
    ``"A->B#2"``, ``"A->B#3"`` and so on.
    """
    base = f"{source_id}->{target_id}"
    return base if occurrence <= 1 else f"{base}#{occurrence}"


@dataclass(frozen=True)
class Edge:
    """A directed edge between two nodes, identified by label.

    Attributes:
        id: Synthetic id derived from the endpoints (see ``edge_id``).
        source_id: Label of the source node.
        target_id: Label of the target node.
        style: Connector style that declared the edge.
        origin_line: Index of the declaring line, or None for an edge
            that exists only in the view and has not been written yet.
    """

    id: str
    source_id: str
    target_id: str
    style: EdgeStyle = EdgeStyle.RIGHT_LEFT
    origin_line: int | None = None

    @property
    def source_anchor(self) -> Anchor:
        return self.style.anchors[0]

    @property
    def target_anchor(self) -> Anchor:
        return self.style.anchors[1]

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id

    def to_line(self) -> str:
        """Render the canonical text line for this edge."""
        return f"{self.source_id} {self.style.token} {self.target_id}"

    def __str__(self) -> str:
        """Human-readable representation."""
        return self.to_line()
