"""Graph module - Core graph data structures.

Exports:
- Position: Canvas coordinates
- Node: Named entity, identified by its label
- Anchor: Side of a node an edge attaches to
- EdgeStyle: Connector spelling and the anchor pair it encodes
- Edge: Directed edge between two labels
- MutationEntry / MutationLog: Edit history
- GridPlacement / HashedPlacement: Placement policies

Note: Graph is in linegraph.graph.builder (use graph.factory.parse() to construct)
"""

from linegraph.graph.GraphNode import Node, Position
from linegraph.graph.mutations import MutationEntry, MutationLog
from linegraph.graph.placement import GridPlacement, HashedPlacement
from linegraph.graph.relations import Anchor, Edge, EdgeStyle

__all__ = [
    "Position",
    "Node",
    "Anchor",
    "Edge",
    "EdgeStyle",
    "MutationEntry",
    "MutationLog",
    "GridPlacement",
    "HashedPlacement",
]
