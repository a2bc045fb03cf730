"""BlankParser - Priority 10 parser for empty lines."""

from __future__ import annotations

from linegraph.graph.parsers import BlankLine, LineKind


class BlankParser:
    """Parser for empty or whitespace-only lines.

    Priority: 10 (runs first)

    Blank lines declare nothing but still consume a line index.
    """

    priority = 10

    def match(self, text: str) -> LineKind | None:
        if text.strip():
            return None
        return BlankLine()
