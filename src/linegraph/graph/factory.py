"""Graph Factory - Forward translation from document text to Graph.

This module provides the single entry point for turning text into a
graph. Callers should use ``parse`` (explicit arguments) or
``build_graph`` (arguments taken from configuration) instead of driving
the registry and builder themselves.
"""

from __future__ import annotations

from typing import Any

from linegraph.graph.builder import Graph, GraphBuilder
from linegraph.graph.parsers import ParserRegistry, default_registry
from linegraph.graph.placement import GridPlacement, PlacementPolicy, placement_from_config


def parse(
    text: str,
    placement: PlacementPolicy | None = None,
    strict: bool = False,
    registry: ParserRegistry | None = None,
) -> Graph:
    """Parse a document into a Graph.

    Never raises for malformed text: every line is classified, and lines
    no structured pattern recognises become standalone nodes.

    Args:
        text: Full document text.
        placement: Policy for nodes without a positioned line. A fresh
            ``GridPlacement`` when omitted. The policy is not mutated; the
            state after the last placed node is returned as
            ``graph.placement``.
        strict: Collect warnings for lines that look like broken edges.
        registry: Line parsers to use (default grammar when omitted).

    Returns:
        A new Graph; nothing is shared with earlier parses.
    """
    registry = registry if registry is not None else default_registry()
    builder = GraphBuilder(
        placement=placement if placement is not None else GridPlacement(),
        strict=strict,
    )
    for parsed in registry.claim_and_parse(text):
        builder.add_parsed_line(parsed)
    return builder.build()


def build_graph(text: str, config: dict[str, Any] | None = None) -> Graph:
    """Parse a document using the ``grammar`` and ``placement`` config tables.

    Args:
        text: Full document text.
        config: Configuration dict (defaults when omitted).

    Returns:
        The parsed Graph.
    """
    config = config or {}
    strict = bool(config.get("grammar", {}).get("strict", False))
    return parse(text, placement=placement_from_config(config), strict=strict)
