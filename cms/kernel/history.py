"""
LeeCMS Kernel — History Stack

Linear undo/redo over full content-tree snapshots. Every entry is a deep
copy, both on the way in and on the way out, so no two snapshots (and no
snapshot and the live tree) ever share nested lists or dicts.
"""

from __future__ import annotations

import copy
from typing import Any


class History:
    """
    Snapshot list plus a cursor.

    Entry 0 is the tree the session started from. push() drops any redo
    entries past the cursor before appending.
    """

    def __init__(self, initial: list[dict[str, Any]]) -> None:
        self._entries: list[list[dict[str, Any]]] = [copy.deepcopy(initial)]
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, tree: list[dict[str, Any]]) -> None:
        del self._entries[self._index + 1:]
        self._entries.append(copy.deepcopy(tree))
        self._index = len(self._entries) - 1

    def current(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._entries[self._index])

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> list[dict[str, Any]] | None:
        """Step back; returns the restored tree, or None at the start."""
        if not self.can_undo():
            return None
        self._index -= 1
        return self.current()

    def redo(self) -> list[dict[str, Any]] | None:
        """Step forward; returns the restored tree, or None at the end."""
        if not self.can_redo():
            return None
        self._index += 1
        return self.current()
