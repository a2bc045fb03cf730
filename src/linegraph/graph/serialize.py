"""Graph Serialization - Export Graph to JSON-compatible dicts.

Used by the HTTP boundary and the CLI's ``--json`` output. Text is never
regenerated from these dicts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from linegraph.graph.builder import Graph, GrammarWarning
    from linegraph.graph.GraphNode import Node
    from linegraph.graph.mutations import MutationEntry
    from linegraph.graph.relations import Edge


def serialize_node(node: Node) -> dict[str, Any]:
    """Serialize a Node to a JSON-compatible dict."""
    return {
        "id": node.id,
        "label": node.label,
        "position": node.position.as_dict(),
        "origin_line": node.origin_line,
        "position_line": node.position_line,
    }


def serialize_edge(edge: Edge) -> dict[str, Any]:
    """Serialize an Edge to a JSON-compatible dict."""
    return {
        "id": edge.id,
        "source": edge.source_id,
        "target": edge.target_id,
        "source_anchor": edge.source_anchor.value,
        "target_anchor": edge.target_anchor.value,
        "origin_line": edge.origin_line,
        "line": edge.to_line(),
    }


def serialize_warning(warning: GrammarWarning) -> dict[str, Any]:
    return {
        "line": warning.line_index,
        "text": warning.raw_text,
        "message": warning.message,
    }


def serialize_graph(graph: Graph) -> dict[str, Any]:
    """Serialize a Graph to a JSON-compatible dict.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with ``nodes`` (keyed by id), ``edges`` (declaration order)
        and ``warnings``.
    """
    return {
        "nodes": {node.id: serialize_node(node) for node in graph.all_nodes()},
        "edges": [serialize_edge(edge) for edge in graph.iter_edges()],
        "warnings": [serialize_warning(w) for w in graph.warnings],
        "node_count": graph.node_count(),
        "edge_count": graph.edge_count(),
    }


def serialize_mutation_entry(entry: MutationEntry) -> dict[str, Any]:
    """Serialize a MutationEntry for JSON output (text states omitted)."""
    return {
        "id": entry.id,
        "operation": entry.operation,
        "target_id": entry.target_id,
        "timestamp": entry.timestamp.isoformat(),
        "before": {k: v for k, v in entry.before_state.items() if k != "text"},
        "after": {k: v for k, v in entry.after_state.items() if k != "text"},
    }
