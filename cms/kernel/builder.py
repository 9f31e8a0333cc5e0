"""
LeeCMS Kernel — Builder

The editing session for one page: owns the live content tree, the history
stack, the picker/panel state, and the "unsaved changes" flag.

Every structural operation follows the same shape:
    guard → mutate the live tree → push a snapshot → mark unsaved

Guards never raise. A bad address (row gone, column missing, index past
the end) or an unknown component type logs a warning and leaves the tree,
history and flag untouched.

Field edits from the side panel (update_component_data) replace the
instance's data in place without a snapshot. The edit session is committed
to history as a single entry when the panel closes, when another component
is selected, when any other structural operation runs, or before undo().

The only IO is save(), which awaits the injected callback.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from cms.kernel.fields import coerce_data
from cms.kernel.history import History
from cms.kernel.layouts import col_index, col_key, column_count, normalize_layout
from cms.kernel.registry import ComponentRegistry
from cms.kernel.types import (
    DEFAULT_LAYOUT,
    DEFAULT_ROW_STYLE,
    DIRECTIONS,
    BuilderState,
    ConfirmCallback,
    SaveCallback,
    SaveResult,
    new_component_id,
    new_row_id,
)

logger = logging.getLogger(__name__)

DELETE_ROW_PROMPT = "Are you sure you want to delete this row and all its components?"


def coerce_tree(tree: Any) -> list[dict[str, Any]]:
    """A persisted tree that is not a list is treated as empty."""
    if not isinstance(tree, list):
        return []
    return copy.deepcopy(tree)


def _always_confirm(message: str) -> bool:
    return True


class Builder:
    """
    One page-editing session.

    `registry` is injected; `on_save` receives a deep copy of the tree;
    `confirm` is asked before destructive operations (delete_row).
    """

    def __init__(
        self,
        tree: Any,
        registry: ComponentRegistry,
        *,
        on_save: SaveCallback | None = None,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.registry = registry
        self._tree = coerce_tree(tree)
        self._history = History(self._tree)
        self._on_save = on_save
        self._confirm = confirm or _always_confirm

        self.state = BuilderState.IDLE
        self._target: tuple[int, int] | None = None
        self._selection: tuple[int, str, int] | None = None
        self._pending_edit = False

        self._unsaved = False
        self._revision = 0
        self._saving = False
        self._save_lock = asyncio.Lock()
        self.last_error: str | None = None

    # -- read-only views --

    @property
    def tree(self) -> list[dict[str, Any]]:
        """The live tree. Treat as read-only; use snapshot() for a copy."""
        return self._tree

    @property
    def history_index(self) -> int:
        return self._history.index

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def selection(self) -> tuple[int, str, int] | None:
        return self._selection

    @property
    def target(self) -> tuple[int, int] | None:
        return self._target

    def snapshot(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._tree)

    def can_undo(self) -> bool:
        return self._pending_edit or self._history.can_undo()

    def can_redo(self) -> bool:
        return not self._pending_edit and self._history.can_redo()

    def has_unsaved_changes(self) -> bool:
        return self._unsaved

    def is_saving(self) -> bool:
        return self._saving

    def selected_component(self) -> dict[str, Any] | None:
        """The instance open in the side panel, if its address still resolves."""
        if self._selection is None:
            return None
        return self._instance_at(*self._selection)

    # -- picker / panel transitions --

    def open_row_picker(self) -> None:
        self._target = None
        self.state = BuilderState.ROW_PICKER

    def open_component_picker(self, row_index: int, column_index: int) -> bool:
        """Step one of adding a component: remember the target column."""
        if self._row_at(row_index) is None:
            logger.warning("builder: component picker for missing row %r", row_index)
            return False
        self._target = (row_index, column_index)
        self.state = BuilderState.COMPONENT_PICKER
        return True

    add_component_to_column = open_component_picker

    def close_picker(self) -> None:
        self._target = None
        self.state = BuilderState.EDITING_FIELDS if self._selection else BuilderState.IDLE

    def pick_layout(self, layout_id: str) -> dict[str, Any]:
        row = self.add_row(layout_id)
        self.close_picker()
        return row

    def pick_component(self, type: str) -> dict[str, Any] | None:
        """
        Step two of adding a component: create an instance of `type` with
        registry defaults in the remembered column. Closes the picker.
        """
        target = self._target
        self.close_picker()
        if target is None:
            logger.warning("builder: pick_component(%r) with no target column", type)
            return None
        return self.add_component(target[0], target[1], type)

    def select_component(self, row_index: int, key: str, index: int) -> bool:
        if self._instance_at(row_index, key, index) is None:
            logger.warning("builder: select of missing component %r/%r/%r", row_index, key, index)
            return False
        self._flush_pending()
        self._selection = (row_index, key, index)
        self.state = BuilderState.EDITING_FIELDS
        return True

    def deselect(self) -> None:
        self._flush_pending()
        self._selection = None
        if self.state is BuilderState.EDITING_FIELDS:
            self.state = BuilderState.IDLE

    # -- row operations --

    def add_row(self, layout_id: str = DEFAULT_LAYOUT) -> dict[str, Any]:
        self._flush_pending()
        row = {
            "id": new_row_id(),
            "layout": normalize_layout(layout_id),
            "components": {},
            **DEFAULT_ROW_STYLE,
        }
        self._tree.append(row)
        self._commit()
        return row

    def delete_row(self, index: int) -> bool:
        if self._row_at(index) is None:
            logger.warning("builder: delete of missing row %r", index)
            return False
        if not self._confirm(DELETE_ROW_PROMPT):
            return False
        self._flush_pending()
        del self._tree[index]
        self._drop_selection_in_row(index)
        self._commit()
        return True

    def move_row(self, index: int, direction: str) -> bool:
        new_index = _neighbor(index, direction, len(self._tree))
        if new_index is None:
            return False
        self._flush_pending()
        self._tree[index], self._tree[new_index] = self._tree[new_index], self._tree[index]
        self._selection = None
        if self.state is BuilderState.EDITING_FIELDS:
            self.state = BuilderState.IDLE
        self._commit()
        return True

    def update_row(self, index: int, patch: dict[str, Any]) -> bool:
        """Merge `patch` into the row. `id` is preserved."""
        row = self._row_at(index)
        if row is None or not isinstance(patch, dict):
            logger.warning("builder: update of missing row %r", index)
            return False
        self._flush_pending()
        patch = copy.deepcopy(patch)
        patch.pop("id", None)
        if "layout" in patch:
            patch["layout"] = normalize_layout(patch["layout"])
        row.update(patch)
        self._commit()
        return True

    # -- component operations --

    def add_component(self, row_index: int, column_index: int, type: str) -> dict[str, Any] | None:
        row = self._row_at(row_index)
        if row is None:
            logger.warning("builder: add component to missing row %r", row_index)
            return None
        if self.registry.lookup(type) is None:
            logger.warning("builder: add of unknown component type %r", type)
            return None
        if not isinstance(column_index, int) or not 0 <= column_index < column_count(row.get("layout")):
            logger.warning("builder: add component to missing column %r", column_index)
            return None

        self._flush_pending()
        instance = {
            "id": new_component_id(),
            "type": type,
            "data": self.registry.default_data(type),
        }
        components = row.get("components")
        if not isinstance(components, dict):
            components = row["components"] = {}
        column = components.get(col_key(column_index))
        if not isinstance(column, list):
            column = components[col_key(column_index)] = []
        column.append(instance)
        self._commit()
        return instance

    def update_component_data(self, row_index: int, key: str, index: int, data: dict[str, Any]) -> bool:
        """
        Replace the instance's data wholesale, coercing declared fields to
        their kind. Committed to history later.
        """
        instance = self._instance_at(row_index, key, index)
        if instance is None or not isinstance(data, dict):
            logger.warning("builder: update of missing component %r/%r/%r", row_index, key, index)
            return False
        entry = self.registry.lookup(instance.get("type"))
        instance["data"] = coerce_data(entry.fields, data) if entry else copy.deepcopy(data)
        self._pending_edit = True
        self._mark_changed()
        return True

    def delete_component(self, row_index: int, key: str, index: int) -> bool:
        column = self._column_at(row_index, key)
        if column is None or not _in_range(index, column):
            logger.warning("builder: delete of missing component %r/%r/%r", row_index, key, index)
            return False
        self._flush_pending()
        del column[index]
        if self._selection is not None and self._selection[:2] == (row_index, key):
            self._selection = None
            if self.state is BuilderState.EDITING_FIELDS:
                self.state = BuilderState.IDLE
        self._commit()
        return True

    def duplicate_component(self, row_index: int, key: str, index: int) -> dict[str, Any] | None:
        column = self._column_at(row_index, key)
        if column is None or not _in_range(index, column):
            logger.warning("builder: duplicate of missing component %r/%r/%r", row_index, key, index)
            return None
        self._flush_pending()
        clone = copy.deepcopy(column[index])
        clone["id"] = new_component_id()
        column.insert(index + 1, clone)
        if self._selection is not None and self._selection[:2] == (row_index, key) and self._selection[2] > index:
            self._selection = (row_index, key, self._selection[2] + 1)
        self._commit()
        return clone

    def move_component(self, row_index: int, key: str, index: int, direction: str) -> bool:
        column = self._column_at(row_index, key)
        if column is None or not _in_range(index, column):
            return False
        new_index = _neighbor(index, direction, len(column))
        if new_index is None:
            return False
        self._flush_pending()
        column[index], column[new_index] = column[new_index], column[index]
        if self._selection == (row_index, key, index):
            self._selection = (row_index, key, new_index)
        elif self._selection == (row_index, key, new_index):
            self._selection = (row_index, key, index)
        self._commit()
        return True

    # -- history --

    def undo(self) -> bool:
        self._flush_pending()
        restored = self._history.undo()
        if restored is None:
            return False
        self._restore(restored)
        return True

    def redo(self) -> bool:
        self._flush_pending()
        restored = self._history.redo()
        if restored is None:
            return False
        self._restore(restored)
        return True

    # -- save --

    async def save(self) -> SaveResult:
        """
        Hand a deep copy of the live tree to the save callback.

        Overlapping calls queue on a lock; each writes the tree as it is
        when its turn comes. Failures are recorded and returned, never
        raised, and leave the tree and history as they were.
        """
        if self._on_save is None:
            return SaveResult(ok=False, error="No save handler configured")

        async with self._save_lock:
            self._saving = True
            revision = self._revision
            tree = self.snapshot()
            try:
                await self._on_save(tree)
            except Exception as e:
                logger.exception("builder: save failed")
                self.last_error = str(e) or type(e).__name__
                return SaveResult(ok=False, error=self.last_error)
            finally:
                self._saving = False

            # Edits made while the callback ran stay unsaved.
            if self._revision == revision:
                self._unsaved = False
            self.last_error = None
            return SaveResult(ok=True)

    # -- internals --

    def _commit(self) -> None:
        self._history.push(self._tree)
        self._pending_edit = False
        self._mark_changed()

    def _mark_changed(self) -> None:
        self._revision += 1
        self._unsaved = True

    def _flush_pending(self) -> None:
        if self._pending_edit:
            self._history.push(self._tree)
            self._pending_edit = False

    def _restore(self, tree: list[dict[str, Any]]) -> None:
        self._tree = tree
        self._mark_changed()
        if self._selection is not None and self.selected_component() is None:
            self._selection = None
            if self.state is BuilderState.EDITING_FIELDS:
                self.state = BuilderState.IDLE

    def _drop_selection_in_row(self, index: int) -> None:
        if self._selection is not None and self._selection[0] >= index:
            self._selection = None
            if self.state is BuilderState.EDITING_FIELDS:
                self.state = BuilderState.IDLE

    def _row_at(self, index: int) -> dict[str, Any] | None:
        if not _in_range(index, self._tree):
            return None
        row = self._tree[index]
        return row if isinstance(row, dict) else None

    def _column_at(self, row_index: int, key: str) -> list[Any] | None:
        row = self._row_at(row_index)
        if row is None or col_index(key) is None:
            return None
        components = row.get("components")
        if not isinstance(components, dict):
            return None
        column = components.get(key)
        return column if isinstance(column, list) else None

    def _instance_at(self, row_index: int, key: str, index: int) -> dict[str, Any] | None:
        column = self._column_at(row_index, key)
        if column is None or not _in_range(index, column):
            return None
        instance = column[index]
        return instance if isinstance(instance, dict) else None


def _in_range(index: Any, items: list[Any]) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(items)


def _neighbor(index: Any, direction: str, length: int) -> int | None:
    """Index of the neighbor in `direction`, or None when out of bounds."""
    if direction not in DIRECTIONS or not isinstance(index, int) or not 0 <= index < length:
        return None
    new_index = index - 1 if direction == "up" else index + 1
    if not 0 <= new_index < length:
        return None
    return new_index
