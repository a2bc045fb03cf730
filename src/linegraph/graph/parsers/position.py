"""PositionParser - Priority 40 parser for ``x,y,Label`` lines."""

from __future__ import annotations

import re

from linegraph.graph.parsers import LineKind, PositionedNodeLine


class PositionParser:
    """Parser for positioned node declarations.

    Priority: 40 (after both edge spellings)

    Coordinates are integers; a leading minus sign is accepted so that
    a node dragged above or left of the origin still round-trips.
    """

    priority = 40

    PATTERN = re.compile(r"^(?P<x>-?\d+)\s*,\s*(?P<y>-?\d+)\s*,(?P<label>.+)$")

    def match(self, text: str) -> LineKind | None:
        m = self.PATTERN.match(text.strip())
        if not m:
            return None
        label = m.group("label").strip()
        if not label:
            return None
        return PositionedNodeLine(x=int(m.group("x")), y=int(m.group("y")), label=label)
