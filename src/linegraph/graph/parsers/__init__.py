"""Line grammar - priority-ordered line classification.

Every line of a document is exactly one of four kinds. Parsers are
registered with priorities and tried in ascending order; the first
parser that recognises a line decides its kind. The remainder parser
(priority 999) accepts anything, so classification is total.

Exports:
- BlankLine, EdgeLine, PositionedNodeLine, StandaloneNodeLine: line kinds
- LineKind: Union of the four kinds
- ParsedLine: A classified line with its index and raw text
- LineParser: Protocol for parser implementations
- ParserRegistry: Manages parser registration and classification
- classify: Classify one line with the default registry
- split_lines: Split text into (index, content) pairs
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from linegraph.graph.relations import EdgeStyle


@dataclass(frozen=True)
class BlankLine:
    """Empty or whitespace-only line."""


@dataclass(frozen=True)
class EdgeLine:
    """``A -> B`` or ``A -} B``."""

    source: str
    target: str
    style: EdgeStyle


@dataclass(frozen=True)
class PositionedNodeLine:
    """``x,y,Label``."""

    x: int
    y: int
    label: str


@dataclass(frozen=True)
class StandaloneNodeLine:
    """Any other non-blank line; the label is the trimmed text."""

    label: str


LineKind = Union[BlankLine, EdgeLine, PositionedNodeLine, StandaloneNodeLine]


@dataclass(frozen=True)
class ParsedLine:
    """A single classified line.

    Attributes:
        index: 0-based position of the line in the text, blanks included.
        raw_text: The line exactly as written (without its line ending).
        kind: What the line declares.
    """

    index: int
    raw_text: str
    kind: LineKind


@runtime_checkable
class LineParser(Protocol):
    """Protocol for line parsers.

    Parsers are tried in priority order (lower = earlier). ``match``
    returns None when the line is not recognised.
    """

    @property
    def priority(self) -> int:
        """Priority for this parser (lower = earlier)."""
        ...

    def match(self, text: str) -> LineKind | None:
        """Recognise a single line.

        Args:
            text: The raw line, without its line ending.

        Returns:
            The line kind, or None to let the next parser try.
        """
        ...


def split_lines(text: str) -> list[tuple[int, str]]:
    """Split text into (index, content) pairs.

    Lines are split on ``\\n`` only. A trailing ``\\r`` belongs to the line
    ending and is stripped from the content. Empty text has no lines.
    """
    if not text:
        return []
    return [
        (i, line[:-1] if line.endswith("\r") else line)
        for i, line in enumerate(text.split("\n"))
    ]


class ParserRegistry:
    """Registry for managing line parsers.

    Parsers are registered and then tried in priority order for each line.
    """

    def __init__(self) -> None:
        self.parsers: list[LineParser] = []

    def register(self, parser: LineParser) -> None:
        """Register a parser.

        Args:
            parser: A parser implementing the LineParser protocol.
        """
        self.parsers.append(parser)

    def get_ordered(self) -> list[LineParser]:
        """Get parsers sorted by priority (ascending)."""
        return sorted(self.parsers, key=lambda p: p.priority)

    def classify(self, text: str) -> LineKind:
        """Classify one line; the first matching parser wins.

        Falls back to a standalone node when no registered parser claims
        the line, so a registry without a remainder parser is still total.
        """
        for parser in self.get_ordered():
            kind = parser.match(text)
            if kind is not None:
                return kind
        stripped = text.strip()
        return StandaloneNodeLine(stripped) if stripped else BlankLine()

    def claim_and_parse(self, text: str) -> Iterator[ParsedLine]:
        """Classify every line of a document.

        Args:
            text: Full document text.

        Yields:
            ParsedLine for each line, in order, blanks included.
        """
        ordered = self.get_ordered()
        for index, line in split_lines(text):
            kind: LineKind | None = None
            for parser in ordered:
                kind = parser.match(line)
                if kind is not None:
                    break
            if kind is None:
                stripped = line.strip()
                kind = StandaloneNodeLine(stripped) if stripped else BlankLine()
            yield ParsedLine(index=index, raw_text=line, kind=kind)


def create_default_registry() -> ParserRegistry:
    """Build a registry with the four standard line parsers."""
    from linegraph.graph.parsers.blank import BlankParser
    from linegraph.graph.parsers.edge import BottomTopEdgeParser, RightLeftEdgeParser
    from linegraph.graph.parsers.position import PositionParser
    from linegraph.graph.parsers.remainder import RemainderParser

    registry = ParserRegistry()
    registry.register(BlankParser())
    registry.register(RightLeftEdgeParser())
    registry.register(BottomTopEdgeParser())
    registry.register(PositionParser())
    registry.register(RemainderParser())
    return registry


_DEFAULT_REGISTRY: ParserRegistry | None = None


def default_registry() -> ParserRegistry:
    """Return the shared default registry (parsers are stateless)."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_default_registry()
    return _DEFAULT_REGISTRY


def classify(line: str) -> LineKind:
    """Classify a single line of text.

    Pure and total: unrecognised lines become standalone nodes.

    Example:
        >>> classify("A -> B")
        EdgeLine(source='A', target='B', style=<EdgeStyle.RIGHT_LEFT: '->'>)
        >>> classify("   ")
        BlankLine()
    """
    return default_registry().classify(line)


__all__ = [
    "BlankLine",
    "EdgeLine",
    "PositionedNodeLine",
    "StandaloneNodeLine",
    "LineKind",
    "ParsedLine",
    "LineParser",
    "ParserRegistry",
    "classify",
    "create_default_registry",
    "default_registry",
    "split_lines",
]
