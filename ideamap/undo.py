"""Undo/Redo history for ideamap."""

from dataclasses import dataclass
from typing import List, Optional

from ideamap.model import Node, clone_deep

DEFAULT_CAPACITY = 50


@dataclass(frozen=True)
class HistoryEntry:
    """A snapshot of the whole tree after a completed edit."""
    tree: Node
    description: str = ""


class HistoryLog:
    """Bounded linear undo/redo log of whole-tree snapshots.

    `cursor` points at the entry for the current state. Entries after it
    are redo-able and get discarded by the next checkpoint.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._entries: List[HistoryEntry] = []
        self._cursor = -1
        self._revision = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def revision(self) -> int:
        """Number of checkpoints recorded so far."""
        return self._revision

    @property
    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self._cursor < len(self._entries) - 1

    @property
    def undo_description(self) -> str:
        """Description of the edit the next undo reverts."""
        if self.can_undo:
            return self._entries[self._cursor].description
        return ""

    @property
    def redo_description(self) -> str:
        """Description of the edit the next redo re-applies."""
        if self.can_redo:
            return self._entries[self._cursor + 1].description
        return ""

    def checkpoint(self, tree: Node, description: str = ""):
        """Record `tree` as the new current state."""
        if self.can_redo:
            del self._entries[self._cursor + 1:]

        self._entries.append(HistoryEntry(clone_deep(tree), description))
        self._cursor = len(self._entries) - 1
        self._revision += 1

        # Trim history if needed
        while len(self._entries) > self.capacity:
            self._entries.pop(0)
            self._cursor -= 1

    def undo(self) -> Optional[Node]:
        """Step back one entry and return a copy of it, or None at the start."""
        if not self.can_undo:
            return None

        self._cursor -= 1
        return clone_deep(self._entries[self._cursor].tree)

    def redo(self) -> Optional[Node]:
        """Step forward one entry and return a copy of it, or None at the end."""
        if not self.can_redo:
            return None

        self._cursor += 1
        return clone_deep(self._entries[self._cursor].tree)
