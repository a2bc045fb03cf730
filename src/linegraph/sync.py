"""Sync controller - keeps document text and graph from fighting each other.

A text edit runs one forward translation. A graph edit runs one reverse
translation followed by exactly one forward translation, so the new
graph's origin lines describe the new text. Events that arrive while a
cycle is running (typically from a subscriber reacting to a
notification) are queued and handled after it, never interleaved.

Usage:
    controller = SyncController(text)
    controller.on_graph(render)
    controller.submit(NodeMoved("A", 30, 40))
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from linegraph.exceptions import UnknownNodeError
from linegraph.graph.builder import Graph
from linegraph.graph.factory import parse
from linegraph.graph.mutations import MutationEntry, MutationLog
from linegraph.graph.placement import GridPlacement, PlacementPolicy
from linegraph.graph.relations import Anchor
from linegraph.utilities.text_writer import apply_connect, apply_node_move, remove_edge_by_id

logger = logging.getLogger(__name__)


class SyncState(Enum):
    """What the controller is currently doing."""

    IDLE = "idle"
    TEXT_DRIVEN = "text_driven"
    GRAPH_DRIVEN = "graph_driven"


@dataclass(frozen=True)
class TextEdited:
    """The user replaced the document text."""

    text: str


@dataclass(frozen=True)
class UndoApplied(TextEdited):
    """Text restored by undo; the older history stays valid."""


@dataclass(frozen=True)
class NodeMoved:
    """A node was dropped at a new position."""

    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class EdgeConnected:
    """Two nodes were connected in the view."""

    source_id: str
    target_id: str
    source_anchor: Anchor | str = Anchor.RIGHT
    target_anchor: Anchor | str = Anchor.LEFT


@dataclass(frozen=True)
class EdgeRemoved:
    """An edge was deleted in the view."""

    edge_id: str


SyncEvent = Union[TextEdited, NodeMoved, EdgeConnected, EdgeRemoved]

GraphListener = Callable[[Graph], None]
TextListener = Callable[[str], None]


class SyncController:
    """State machine arbitrating between forward and reverse translation.

    Attributes:
        state: Current SyncState; IDLE between cycles.
        text: Authoritative document text.
        graph: Graph parsed from ``text``.
        mutation_log: Graph-driven edits that changed the text.
    """

    def __init__(
        self,
        text: str = "",
        placement: PlacementPolicy | None = None,
        strict: bool = False,
    ) -> None:
        self._placement: PlacementPolicy = placement if placement is not None else GridPlacement()
        self._strict = strict
        self.state = SyncState.IDLE
        self.text = text
        self.graph = self._parse(text)
        self.mutation_log = MutationLog()
        self._queue: deque[SyncEvent] = deque()
        self._graph_listeners: list[GraphListener] = []
        self._text_listeners: list[TextListener] = []
        # Held for a whole submit so cycles from different threads never overlap
        self._lock = threading.RLock()

    # ─────────────────────────────────────────────────────────────────────
    # Subscriptions
    # ─────────────────────────────────────────────────────────────────────

    def on_graph(self, listener: GraphListener) -> None:
        """Call ``listener`` with every new graph snapshot."""
        self._graph_listeners.append(listener)

    def on_text(self, listener: TextListener) -> None:
        """Call ``listener`` whenever a cycle changes the text."""
        self._text_listeners.append(listener)

    # ─────────────────────────────────────────────────────────────────────
    # Event handling
    # ─────────────────────────────────────────────────────────────────────

    @property
    def pending(self) -> int:
        """Number of events waiting for the current cycle to finish."""
        return len(self._queue)

    def submit(self, event: SyncEvent) -> None:
        """Queue an event and, when idle, run cycles until the queue is empty.

        A call made from inside a listener only queues; the outer call
        drains it once the running cycle has completed. A call from another
        thread waits until the running submit has returned. If a cycle
        raises, its event is dropped and events behind it stay pending
        until the next submit.

        Raises:
            UnknownNodeError: An edit referenced a node not in the graph.
            UnknownEdgeError: A removal referenced an edge not in the graph.
            ValueError: A connect used an anchor name that does not exist.
        """
        with self._lock:
            self._queue.append(event)
            if self.state is not SyncState.IDLE:
                logger.debug("queued %s while %s", type(event).__name__, self.state.value)
                return
            while self._queue:
                self._run_cycle(self._queue.popleft())

    def set_text(self, text: str) -> None:
        self.submit(TextEdited(text))

    def move_node(self, node_id: str, x: float, y: float) -> None:
        self.submit(NodeMoved(node_id, x, y))

    def connect(
        self,
        source_id: str,
        target_id: str,
        source_anchor: Anchor | str = Anchor.RIGHT,
        target_anchor: Anchor | str = Anchor.LEFT,
    ) -> None:
        self.submit(EdgeConnected(source_id, target_id, source_anchor, target_anchor))

    def remove_edge(self, edge_id: str) -> None:
        self.submit(EdgeRemoved(edge_id))

    def undo_last(self) -> MutationEntry | None:
        """Restore the text from before the most recent graph edit.

        A text edit that changes the document clears the history, so undo
        never discards typing done after the edit it reverts.

        Returns:
            The undone entry, or None if there was nothing to undo.
        """
        with self._lock:
            entry = self.mutation_log.pop()
            if entry is None:
                return None
            self.submit(UndoApplied(entry.before_state["text"]))
            return entry

    # ─────────────────────────────────────────────────────────────────────
    # Cycles
    # ─────────────────────────────────────────────────────────────────────

    def _parse(self, text: str) -> Graph:
        return parse(text, placement=self._placement, strict=self._strict)

    def _run_cycle(self, event: SyncEvent) -> None:
        try:
            if isinstance(event, TextEdited):
                self.state = SyncState.TEXT_DRIVEN
                changed = event.text != self.text
                self._forward(event.text, notify_text=changed)
                if changed and not isinstance(event, UndoApplied):
                    self.mutation_log.clear()
            else:
                self.state = SyncState.GRAPH_DRIVEN
                self._reverse(event)
        except Exception:
            logger.debug("dropped %r", event, exc_info=True)
            self.state = SyncState.IDLE
            raise
        self.state = SyncState.IDLE

    def _forward(self, text: str, notify_text: bool) -> None:
        graph = self._parse(text)
        self.text = text
        self.graph = graph
        if notify_text:
            for text_listener in list(self._text_listeners):
                text_listener(text)
        for graph_listener in list(self._graph_listeners):
            graph_listener(graph)

    def _reverse(self, event: SyncEvent) -> None:
        before = self.text
        operation, target_id, details = self._describe(event)
        after = self._rewrite(event)
        if after == before:
            logger.debug("%s(%s) left the text unchanged", operation, target_id)
        else:
            self.mutation_log.append(
                MutationEntry(
                    operation=operation,
                    target_id=target_id,
                    before_state={"text": before},
                    after_state={"text": after, **details},
                )
            )
        # Exactly one forward translation, even for a no-op edit
        self._forward(after, notify_text=after != before)

    def _rewrite(self, event: SyncEvent) -> str:
        if isinstance(event, NodeMoved):
            node = self.graph.find_by_id(event.node_id)
            if node is None:
                raise UnknownNodeError(event.node_id)
            return apply_node_move(
                self.text, event.node_id, event.x, event.y, position_line=node.position_line
            )
        if isinstance(event, EdgeConnected):
            return apply_connect(
                self.text,
                event.source_id,
                event.target_id,
                event.source_anchor,
                event.target_anchor,
                graph=self.graph,
            )
        if isinstance(event, EdgeRemoved):
            return remove_edge_by_id(self.text, event.edge_id, graph=self.graph)
        raise TypeError(f"Unsupported event: {event!r}")

    @staticmethod
    def _describe(event: SyncEvent) -> tuple[str, str, dict[str, Any]]:
        if isinstance(event, NodeMoved):
            return "move_node", event.node_id, {"x": event.x, "y": event.y}
        if isinstance(event, EdgeConnected):
            return (
                "connect",
                f"{event.source_id}->{event.target_id}",
                {"source_id": event.source_id, "target_id": event.target_id},
            )
        if isinstance(event, EdgeRemoved):
            return "remove_edge", event.edge_id, {}
        raise TypeError(f"Unsupported event: {event!r}")


__all__ = [
    "SyncState",
    "SyncController",
    "SyncEvent",
    "TextEdited",
    "UndoApplied",
    "NodeMoved",
    "EdgeConnected",
    "EdgeRemoved",
]
