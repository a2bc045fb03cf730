"""Edge parsers - Priority 20/30 parsers for relationship lines.

Parses relationship lines in two spellings:
- ``A -> B``: edge from A's right side to B's left side
- ``A -} B``: edge from A's bottom to B's top (``-]`` is a legacy synonym)

Labels are not escaped; a label containing an arrow token is split at
the first token.
"""

from __future__ import annotations

import re

from linegraph.graph.parsers import EdgeLine, LineKind
from linegraph.graph.relations import EdgeStyle


class _EdgeParser:
    """Shared matching for the connector spellings."""

    priority: int
    style: EdgeStyle
    PATTERN: re.Pattern[str]

    def match(self, text: str) -> LineKind | None:
        m = self.PATTERN.match(text.strip())
        if not m:
            return None
        source = m.group("source").strip()
        target = m.group("target").strip()
        if not source or not target:
            return None
        return EdgeLine(source=source, target=target, style=self.style)


class RightLeftEdgeParser(_EdgeParser):
    """Parser for ``A -> B`` lines.

    Priority: 20 (after blanks)
    """

    priority = 20
    style = EdgeStyle.RIGHT_LEFT

    # Non-greedy before the token, greedy after
    PATTERN = re.compile(r"^(?P<source>.+?)\s*->\s*(?P<target>.+)$")


class BottomTopEdgeParser(_EdgeParser):
    """Parser for ``A -} B`` lines.

    Priority: 30 (after right/left edges)
    """

    priority = 30
    style = EdgeStyle.BOTTOM_TOP

    PATTERN = re.compile(r"^(?P<source>.+?)\s*-[}\]]\s*(?P<target>.+)$")
