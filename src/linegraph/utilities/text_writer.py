"""Document text rewriting - reverse translation from graph edits to text.

Each function takes the previous full text and one edit, and returns the
new full text. Only the line an edit concerns is touched; every other
line keeps its content, its position and its line ending.

Public API
----------
- ``canonical_edge_line`` - text line for an edge with a given anchor pair
- ``apply_node_move``     - rewrite a node's positioned line
- ``apply_connect``       - append an edge line unless it already exists
- ``apply_remove_edge``   - delete one edge line, by index or by content
- ``remove_edge_by_id``   - delete the line that declared an edge id
"""

from __future__ import annotations

import logging
import math
from typing import Any

from linegraph.exceptions import UnknownEdgeError, UnknownNodeError
from linegraph.graph.builder import Graph
from linegraph.graph.factory import parse
from linegraph.graph.GraphNode import Node
from linegraph.graph.parsers import EdgeLine, PositionedNodeLine, classify
from linegraph.graph.relations import Anchor, EdgeStyle

logger = logging.getLogger(__name__)

# Marks "look the line up from the text" for apply_node_move
_LOOKUP: Any = object()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _newline_for(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _replace_content(raw: str, content: str) -> str:
    """Swap a raw line's content, keeping its indentation and ``\\r``."""
    ending = "\r" if raw.endswith("\r") else ""
    body = raw[:-1] if ending else raw
    indent = body[: len(body) - len(body.lstrip())]
    return f"{indent}{content}{ending}"


def _require_node(graph: Graph, node_id: str) -> Node:
    node = graph.find_by_id(node_id)
    if node is None:
        raise UnknownNodeError(node_id)
    return node


def _holds_position_for(lines: list[str], index: int, node_id: str) -> bool:
    if not 0 <= index < len(lines):
        return False
    kind = classify(lines[index])
    return isinstance(kind, PositionedNodeLine) and kind.label == node_id


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def canonical_edge_line(
    source_id: str,
    target_id: str,
    source_anchor: Anchor | str = Anchor.RIGHT,
    target_anchor: Anchor | str = Anchor.LEFT,
) -> str:
    """Build the text line declaring an edge.

    (bottom, top) anchors give ``"A -} B"``; any other pair gives ``"A -> B"``.
    """
    style = EdgeStyle.from_anchors(source_anchor, target_anchor)
    return f"{source_id} {style.token} {target_id}"


def apply_node_move(
    text: str,
    node_id: str,
    x: float,
    y: float,
    *,
    position_line: int | None = _LOOKUP,
) -> str:
    """Rewrite the positioned line of a moved node.

    Replaces the node's positioned line with ``"<x>,<y>,<label>"``. A node
    whose position was placed rather than written (standalone lines and
    edge-only mentions) has no such line, and the text is returned
    unchanged: moving it does not materialize a new line.

    Args:
        text: Previous full text.
        node_id: Label of the moved node.
        x: New x coordinate (rounded to int).
        y: New y coordinate (rounded to int).
        position_line: Index of the node's positioned line, as recorded by
            the last parse. ``None`` means the node has none. When omitted
            the text is parsed to find it. A stale index (one that no
            longer holds this node's position) is re-resolved.

    Returns:
        The updated text.

    Raises:
        UnknownNodeError: If the text had to be parsed and declares no
            such node.
        ValueError: If a coordinate is infinite or NaN.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Coordinates must be finite: {x!r}, {y!r}")
    new_x, new_y = int(round(x)), int(round(y))

    if position_line is _LOOKUP:
        position_line = _require_node(parse(text), node_id).position_line
    if position_line is None:
        logger.debug("move of %r not written: node has no positioned line", node_id)
        return text

    lines = text.split("\n")
    if not _holds_position_for(lines, position_line, node_id):
        logger.debug("stale position line %s for %r; re-resolving", position_line, node_id)
        position_line = _require_node(parse(text), node_id).position_line
        if position_line is None:
            return text

    lines[position_line] = _replace_content(lines[position_line], f"{new_x},{new_y},{node_id}")
    return "\n".join(lines)


def apply_connect(
    text: str,
    source_id: str,
    target_id: str,
    source_anchor: Anchor | str = Anchor.RIGHT,
    target_anchor: Anchor | str = Anchor.LEFT,
    graph: Graph | None = None,
) -> str:
    """Append an edge line for a new connection.

    If the text already has a line declaring the same edge (same
    endpoints, same connector), the text is returned unchanged.

    Args:
        text: Previous full text.
        source_id: Label of the source node.
        target_id: Label of the target node.
        source_anchor: Side of the source the connection starts from.
        target_anchor: Side of the target the connection ends at.
        graph: The graph parsed from ``text``, if the caller has one.

    Returns:
        The updated text.

    Raises:
        UnknownNodeError: If either endpoint is not a node of ``text``.
        ValueError: If an anchor string names no anchor.
    """
    graph = graph if graph is not None else parse(text)
    _require_node(graph, source_id)
    _require_node(graph, target_id)

    style = EdgeStyle.from_anchors(source_anchor, target_anchor)
    wanted = EdgeLine(source=source_id, target=target_id, style=style)
    line = canonical_edge_line(source_id, target_id, source_anchor, target_anchor)

    for existing in text.split("\n"):
        if existing.strip() == line or classify(existing) == wanted:
            return text

    if not text:
        return line
    newline = _newline_for(text)
    if text.endswith("\n"):
        return f"{text}{line}{newline}"
    return f"{text}{newline}{line}"


def apply_remove_edge(text: str, edge_line: str, *, origin_line: int | None = None) -> str:
    """Delete exactly one edge line.

    Removal is by identity when ``origin_line`` still holds ``edge_line``;
    otherwise the first line with the same trimmed content is removed.
    When no line matches, the text is returned unchanged.

    Args:
        text: Previous full text.
        edge_line: The line that declared the edge.
        origin_line: Index of that line, as recorded by the last parse.

    Returns:
        The updated text.
    """
    wanted = edge_line.strip()
    lines = text.split("\n")

    index: int | None = None
    if origin_line is not None and 0 <= origin_line < len(lines):
        if lines[origin_line].strip() == wanted:
            index = origin_line
    if index is None:
        index = next((i for i, line in enumerate(lines) if line.strip() == wanted), None)
    if index is None:
        logger.debug("edge line %r not found; nothing removed", wanted)
        return text

    del lines[index]
    return "\n".join(lines)


def remove_edge_by_id(text: str, edge_id: str, graph: Graph | None = None) -> str:
    """Delete the line that declared an edge, resolved by its synthetic id.

    Args:
        text: Previous full text.
        edge_id: Id of the edge as assigned by the last parse.
        graph: The graph parsed from ``text``, if the caller has one.

    Returns:
        The updated text.

    Raises:
        UnknownEdgeError: If no edge of ``text`` has that id.
    """
    graph = graph if graph is not None else parse(text)
    edge = graph.find_edge(edge_id)
    if edge is None or edge.origin_line is None:
        raise UnknownEdgeError(edge_id)
    raw = text.split("\n")[edge.origin_line]
    return apply_remove_edge(text, raw, origin_line=edge.origin_line)


__all__ = [
    "canonical_edge_line",
    "apply_node_move",
    "apply_connect",
    "apply_remove_edge",
    "remove_edge_by_id",
]
