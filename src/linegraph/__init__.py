"""
linegraph - Plain-text diagrams, kept in sync with an editable graph

A diagram is a list of lines: relationships (``A -> B``, ``A -} B``),
positioned nodes (``10,20,A``) and bare node names. linegraph parses
that text into a graph and turns graph edits (moving a node, connecting
two nodes, deleting an edge) back into minimal rewrites of the text.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("linegraph")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from linegraph.exceptions import LinegraphError, UnknownEdgeError, UnknownNodeError
from linegraph.graph.builder import Graph
from linegraph.graph.factory import build_graph, parse
from linegraph.graph.parsers import classify
from linegraph.sync import SyncController, SyncState
from linegraph.utilities.text_writer import (
    apply_connect,
    apply_node_move,
    apply_remove_edge,
    remove_edge_by_id,
)

__all__ = [
    "__version__",
    "Graph",
    "LinegraphError",
    "SyncController",
    "SyncState",
    "UnknownEdgeError",
    "UnknownNodeError",
    "apply_connect",
    "apply_node_move",
    "apply_remove_edge",
    "build_graph",
    "classify",
    "parse",
    "remove_edge_by_id",
]
