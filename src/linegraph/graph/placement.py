"""Placement policies for nodes without a positioned line.

A policy is an immutable value passed explicitly into ``parse``. Each
call to ``place`` returns a position together with the policy to use
for the next node, so parsing stays a pure function of its input.

Exports:
- PlacementPolicy: Protocol for policies
- GridPlacement: Column-major grid, stacking nodes vertically
- HashedPlacement: Position derived from a hash of the label
- placement_from_config: Build a policy from the ``[placement]`` table
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from typing import Any, Protocol

from linegraph.graph.GraphNode import Position


class PlacementPolicy(Protocol):
    """Protocol for node placement policies."""

    def place(self, label: str) -> tuple[Position, PlacementPolicy]:
        """Return a position for ``label`` and the policy for the next node."""
        ...


@dataclass(frozen=True)
class GridPlacement:
    """Stack nodes vertically, wrapping into a new column every ``rows`` nodes.

    Attributes:
        origin_x: X of the first cell.
        origin_y: Y of the first cell.
        step_x: Horizontal distance between columns.
        step_y: Vertical distance between rows.
        rows: Cells per column before wrapping.
        offset: Number of nodes already placed.
    """

    origin_x: int = 50
    origin_y: int = 50
    step_x: int = 200
    step_y: int = 80
    rows: int = 8
    offset: int = 0

    def place(self, label: str) -> tuple[Position, GridPlacement]:
        rows = max(self.rows, 1)
        column, row = divmod(self.offset, rows)
        position = Position(
            x=self.origin_x + column * self.step_x,
            y=self.origin_y + row * self.step_y,
        )
        return position, replace(self, offset=self.offset + 1)


@dataclass(frozen=True)
class HashedPlacement:
    """Scatter nodes over a fixed canvas, seeded by the label.

    The same label always lands on the same spot, whatever else the
    document contains.
    """

    width: int = 800
    height: int = 600

    def place(self, label: str) -> tuple[Position, HashedPlacement]:
        digest = hashlib.sha1(label.encode("utf-8")).digest()
        x = int.from_bytes(digest[:4], "big") % max(self.width, 1)
        y = int.from_bytes(digest[4:8], "big") % max(self.height, 1)
        return Position(x=x, y=y), self


def placement_from_config(config: dict[str, Any]) -> PlacementPolicy:
    """Build a placement policy from a configuration dict.

    Args:
        config: Full configuration dict; the ``placement`` table is read.

    Returns:
        A fresh policy (offset 0 for grids).

    Raises:
        ValueError: If ``placement.policy`` names no known policy.
    """
    section = dict(config.get("placement", {}))
    policy = str(section.pop("policy", "grid")).lower()
    if policy == "grid":
        fields = ("origin_x", "origin_y", "step_x", "step_y", "rows")
        return GridPlacement(**{k: int(section[k]) for k in fields if k in section})
    if policy == "hashed":
        fields = ("width", "height")
        return HashedPlacement(**{k: int(section[k]) for k in fields if k in section})
    raise ValueError(f"Unknown placement policy: {policy!r} (expected 'grid' or 'hashed')")


__all__ = ["PlacementPolicy", "GridPlacement", "HashedPlacement", "placement_from_config"]
