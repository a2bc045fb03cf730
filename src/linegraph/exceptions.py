"""Exception hierarchy for linegraph.

Malformed text is never an error: every line has a defined meaning.
Exceptions are reserved for contract violations by callers of the edit
operations, for unreadable configuration and for document store I/O.
"""

from __future__ import annotations


class LinegraphError(Exception):
    """Base class for all linegraph errors."""


class UnknownNodeError(LinegraphError, KeyError):
    """An edit referenced a node id absent from the current graph."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node {self.node_id!r} not found"


class UnknownEdgeError(LinegraphError, KeyError):
    """An edit referenced an edge id absent from the current graph."""

    def __init__(self, edge_id: str) -> None:
        super().__init__(edge_id)
        self.edge_id = edge_id

    def __str__(self) -> str:
        return f"Edge {self.edge_id!r} not found"


class ConfigError(LinegraphError, ValueError):
    """Configuration file could not be read or parsed."""


class StoreError(LinegraphError):
    """A document store failed to load or save a document."""
