"""RemainderParser - Priority 999 catch-all parser.

Claims every line no other parser recognised and turns it into a
standalone node named by the trimmed text. This keeps classification
total: a mistyped connector becomes a node rather than an error.
"""

from __future__ import annotations

import re

from linegraph.graph.parsers import BlankLine, LineKind, StandaloneNodeLine

# Tokens that suggest a connector was intended but mistyped
SUSPECT_CONNECTOR_RE = re.compile(r"(<-|=>|[-=~]+\s*[>}\])]|\s-+\s*$)")


class RemainderParser:
    """Parser for unclaimed lines.

    Priority: 999 (lowest priority, runs last)
    """

    priority = 999

    def match(self, text: str) -> LineKind | None:
        label = text.strip()
        if not label:
            return BlankLine()
        return StandaloneNodeLine(label)

    @staticmethod
    def looks_like_connector(text: str) -> bool:
        """Return True when a standalone line resembles a broken edge.

        Used by strict mode to warn about lines such as ``A => B`` or
        ``A ->`` that silently became nodes.
        """
        return bool(SUSPECT_CONNECTOR_RE.search(text.strip()))
