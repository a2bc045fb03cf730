"""Mutation types for graph edits.

Every graph-driven edit that changes the document text is recorded as a
MutationEntry. The before_state holds the full previous text, which is
enough to undo the edit by re-running the forward translation.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4


@dataclass
class MutationEntry:
    """Single edit record.

    Attributes:
        operation: Operation type ("move_node", "connect" or "remove_edge").
        target_id: Node or edge id the edit targeted.
        before_state: State before the edit; always includes ``text``.
        after_state: State after the edit; always includes ``text``.
        id: Unique mutation ID (UUID4).
        timestamp: When the edit was applied.
    """

    operation: str
    target_id: str
    before_state: dict[str, Any]
    after_state: dict[str, Any]
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"[{self.id[:8]}] {self.operation}({self.target_id})"


class MutationLog:
    """Append-only edit history, oldest first.

    Example:
        >>> log = MutationLog()
        >>> log.append(MutationEntry("connect", "A->B", {"text": "A"}, {"text": "A\\nA -> B"}))
        >>> len(log)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty mutation log."""
        self._entries: list[MutationEntry] = []

    def append(self, entry: MutationEntry) -> None:
        """Append a mutation entry to the log."""
        self._entries.append(entry)

    def iter_entries(self) -> Iterator[MutationEntry]:
        """Iterate over all entries in chronological order."""
        yield from self._entries

    def __len__(self) -> int:
        """Return the number of entries in the log."""
        return len(self._entries)

    def last(self) -> MutationEntry | None:
        """Return the most recent entry, or None if empty."""
        return self._entries[-1] if self._entries else None

    def pop(self) -> MutationEntry | None:
        """Remove and return the most recent entry.

        Used internally for undo operations. Does not log the removal.
        """
        return self._entries.pop() if self._entries else None

    def clear(self) -> None:
        """Forget every entry; the recorded texts no longer apply."""
        self._entries.clear()


__all__ = ["MutationEntry", "MutationLog"]
