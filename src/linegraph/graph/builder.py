"""Graph Builder - Constructs a Graph from classified lines.

This module provides the builder pattern for constructing a complete
diagram graph from the output of the line grammar. A Graph is rebuilt
from scratch on every parse; the origin-line bookkeeping on nodes and
edges is what lets edits be written back to the right lines.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Iterator

from linegraph.graph.GraphNode import Node, Position
from linegraph.graph.parsers import (
    EdgeLine,
    ParsedLine,
    PositionedNodeLine,
    StandaloneNodeLine,
)
from linegraph.graph.parsers.remainder import RemainderParser
from linegraph.graph.placement import GridPlacement, PlacementPolicy
from linegraph.graph.relations import Edge, edge_id


@dataclass(frozen=True)
class GrammarWarning:
    """A line that parsed, but probably not the way its author meant.

    Only produced in strict mode. Warnings never change the graph.
    """

    line_index: int
    raw_text: str
    message: str

    def __str__(self) -> str:
        return f"line {self.line_index + 1}: {self.message}: {self.raw_text.strip()!r}"


@dataclass
class Graph:
    """Snapshot of the diagram described by a document.

    Attributes:
        placement: Placement policy state after the last placed node.
        warnings: Strict-mode grammar warnings, in line order.
    """

    placement: PlacementPolicy = field(default_factory=GridPlacement)
    warnings: list[GrammarWarning] = field(default_factory=list)

    # Internal storage (prefixed) - excluded from constructor
    _nodes: dict[str, Node] = field(default_factory=dict, init=False)
    _edges: list[Edge] = field(default_factory=list, init=False)

    @property
    def nodes(self) -> dict[str, Node]:
        """Mapping of label to node, in first-mention order."""
        return dict(self._nodes)

    @property
    def edges(self) -> list[Edge]:
        """Edges in first-declaration order."""
        return list(self._edges)

    def find_by_id(self, node_id: str) -> Node | None:
        """Find node by id (its label)."""
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def all_nodes(self) -> Iterator[Node]:
        """Iterate all nodes in first-mention order."""
        yield from self._nodes.values()

    def iter_edges(self) -> Iterator[Edge]:
        """Iterate edges in first-declaration order."""
        yield from self._edges

    def find_edge(self, edge_id: str) -> Edge | None:
        """Find an edge by its synthetic id."""
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def edges_for(self, node_id: str) -> Iterator[Edge]:
        """Iterate edges touching a node, either end."""
        for edge in self._edges:
            if edge.source_id == node_id or edge.target_id == node_id:
                yield edge

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        return len(self._edges)

    def signature(self) -> tuple[frozenset[str], tuple[tuple[str, str, str], ...]]:
        """Structural identity used to compare two parses.

        Node ids as a set, edges as a sorted multiset of
        (source, target, connector token).
        """
        edges = sorted((e.source_id, e.target_id, e.style.token) for e in self._edges)
        return frozenset(self._nodes), tuple(edges)

    def check_invariants(self) -> list[str]:
        """Return a description of every broken invariant (empty when sound)."""
        problems: list[str] = []
        for key, node in self._nodes.items():
            if key != node.id:
                problems.append(f"node indexed as {key!r} has id {node.id!r}")
        seen: set[str] = set()
        for edge in self._edges:
            if edge.id in seen:
                problems.append(f"duplicate edge id {edge.id!r}")
            seen.add(edge.id)
            for end in (edge.source_id, edge.target_id):
                if end not in self._nodes:
                    problems.append(f"edge {edge.id!r} references missing node {end!r}")
        return problems

    def to_text(self) -> str:
        """Serialize the whole graph as positioned nodes followed by edges.

        A derived convenience: edits never go through this, they rewrite
        single lines of the existing text instead.
        """
        lines = [node.to_line() for node in self._nodes.values()]
        lines.extend(edge.to_line() for edge in self._edges)
        return "\n".join(lines)


class GraphBuilder:
    """Builder for constructing a Graph from classified lines.

    Usage:
        builder = GraphBuilder(placement=GridPlacement())
        for parsed in registry.claim_and_parse(text):
            builder.add_parsed_line(parsed)
        graph = builder.build()
    """

    def __init__(self, placement: PlacementPolicy | None = None, strict: bool = False) -> None:
        self._placement: PlacementPolicy = placement if placement is not None else GridPlacement()
        self._strict = strict
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self._pair_counts: Counter[tuple[str, str]] = Counter()
        self._edge_ids: set[str] = set()
        self._warnings: list[GrammarWarning] = []

    def add_parsed_line(self, parsed: ParsedLine) -> None:
        """Add one classified line to the graph under construction."""
        kind = parsed.kind
        if isinstance(kind, EdgeLine):
            self._add_edge(kind, parsed.index)
        elif isinstance(kind, PositionedNodeLine):
            self._add_positioned_node(kind, parsed.index)
        elif isinstance(kind, StandaloneNodeLine):
            self._add_standalone_node(kind, parsed)
        # Blank lines only consume an index

    def _ensure_node(self, label: str) -> Node:
        node = self._nodes.get(label)
        if node is None:
            position, self._placement = self._placement.place(label)
            node = Node(id=label, position=position)
            self._nodes[label] = node
        return node

    def _add_edge(self, kind: EdgeLine, index: int) -> None:
        self._ensure_node(kind.source)
        self._ensure_node(kind.target)
        pair = (kind.source, kind.target)
        self._pair_counts[pair] += 1
        occurrence = self._pair_counts[pair]
        # A label may itself end in "#<n>"; skip ids already handed out
        while edge_id(kind.source, kind.target, occurrence) in self._edge_ids:
            occurrence += 1
        new_id = edge_id(kind.source, kind.target, occurrence)
        self._edge_ids.add(new_id)
        self._edges.append(
            Edge(
                id=new_id,
                source_id=kind.source,
                target_id=kind.target,
                style=kind.style,
                origin_line=index,
            )
        )

    def _add_positioned_node(self, kind: PositionedNodeLine, index: int) -> None:
        node = self._nodes.get(kind.label)
        if node is None:
            node = Node(id=kind.label, position=Position(kind.x, kind.y))
            self._nodes[kind.label] = node
        elif node.position_line is not None:
            # First positioned line wins; later ones are plain mentions
            return
        else:
            node.position = Position(kind.x, kind.y)
        node.position_line = index
        if node.origin_line is None:
            node.origin_line = index

    def _add_standalone_node(self, kind: StandaloneNodeLine, parsed: ParsedLine) -> None:
        node = self._ensure_node(kind.label)
        if node.origin_line is None:
            node.origin_line = parsed.index
        if self._strict and RemainderParser.looks_like_connector(parsed.raw_text):
            self._warnings.append(
                GrammarWarning(
                    line_index=parsed.index,
                    raw_text=parsed.raw_text,
                    message="looks like a malformed edge; treated as a node",
                )
            )

    def build(self) -> Graph:
        """Finalize and return the graph."""
        graph = Graph(placement=self._placement, warnings=list(self._warnings))
        # Nodes are mutable while building; the graph gets its own copies
        graph._nodes = {key: replace(node) for key, node in self._nodes.items()}
        graph._edges = list(self._edges)
        return graph
