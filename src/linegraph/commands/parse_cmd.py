"""
linegraph.commands.parse_cmd - Show the graph a diagram file describes.
"""

from __future__ import annotations

import argparse
import json
import sys

from linegraph.commands._io import config_for, read_document
from linegraph.graph.factory import build_graph
from linegraph.graph.serialize import serialize_graph


def run(args: argparse.Namespace) -> int:
    """Run the parse command.

    Exit code is 1 in strict mode when any line looks like a broken edge.
    """
    config = config_for(args)
    if args.strict:
        config["grammar"]["strict"] = True

    graph = build_graph(read_document(args.file), config)

    if args.json:
        print(json.dumps(serialize_graph(graph), indent=2))
    else:
        print(f"Nodes ({graph.node_count()}):")
        for node in graph.all_nodes():
            where = f"line {node.origin_line + 1}" if node.origin_line is not None else "edges only"
            placed = " (placed)" if node.is_placed else ""
            print(f"  {node.id} @ {node.position}{placed} [{where}]")
        print(f"Edges ({graph.edge_count()}):")
        for edge in graph.iter_edges():
            print(
                f"  {edge.id}: {edge.source_anchor.value} -> {edge.target_anchor.value}"
                f" [line {edge.origin_line + 1}]"
            )

    for warning in graph.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    return 1 if graph.warnings else 0
