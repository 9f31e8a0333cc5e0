"""
LeeCMS Kernel — Action Dispatch

The edit-mode renderer emits inert `data-action` hooks; this module turns
them back into Builder calls. An action is a name plus a params dict. Params
may arrive straight from an element's data attributes, so keys are accepted
in either `col-key` or `col_key` form and integer params may be strings.

Validation is structural (are the params well-formed?). Whether the address
still resolves is the Builder's concern: its guards turn a stale address
into a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from cms.kernel.builder import Builder
from cms.kernel.fields import new_array_item
from cms.kernel.layouts import col_index
from cms.kernel.types import DIRECTIONS

logger = logging.getLogger(__name__)

# name → (integer params, other required params)
ACTION_PARAMS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "open-row-picker": ((), ()),
    "pick-layout": ((), ("layout",)),
    "add-component": (("row", "column"), ()),
    "pick-component": ((), ("type",)),
    "close-picker": ((), ()),
    "row-settings": (("row",), ("patch",)),
    "move-row": (("row",), ("direction",)),
    "delete-row": (("row",), ()),
    "select-component": (("row", "index"), ("col_key",)),
    "deselect": ((), ()),
    "update-component-data": (("row", "index"), ("col_key", "data")),
    "duplicate-component": (("row", "index"), ("col_key",)),
    "move-component": (("row", "index"), ("col_key", "direction")),
    "delete-component": (("row", "index"), ("col_key",)),
    "add-array-item": ((), ("field",)),
    "remove-array-item": (("item",), ("field",)),
    "undo": ((), ()),
    "redo": ((), ()),
}

_INT_PARAMS = {key for int_keys, _ in ACTION_PARAMS.values() for key in int_keys}


@dataclass
class ActionResult:
    applied: bool
    errors: list[str] = field(default_factory=list)
    value: Any = None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """`col-key` → `col_key`; digit strings → int for integer params."""
    if not isinstance(params, dict):
        return {}
    out = {str(k).replace("-", "_"): v for k, v in params.items()}
    for k, v in out.items():
        if k in _INT_PARAMS and isinstance(v, str) and v.strip().lstrip("-").isdigit():
            out[k] = int(v)
    return out


def validate_action(name: str, params: dict[str, Any] | None) -> list[str]:
    """
    Validate an action's name and params.
    Returns a list of error strings. Empty list = valid.
    """
    errors: list[str] = []

    if name not in ACTION_PARAMS:
        errors.append(f"Unknown action: {name}")
        return errors

    if params is not None and not isinstance(params, dict):
        errors.append("Params must be an object")
        return errors

    p = normalize_params(params)
    int_keys, other_keys = ACTION_PARAMS[name]

    for key in int_keys:
        if key not in p:
            errors.append(f"{name} requires '{key}'")
        elif not isinstance(p[key], int) or isinstance(p[key], bool) or p[key] < 0:
            errors.append(f"'{key}' must be a non-negative integer")

    for key in other_keys:
        if key not in p:
            errors.append(f"{name} requires '{key}'")
            continue
        value = p[key]
        if key == "direction" and value not in DIRECTIONS:
            errors.append(f"Invalid direction: {value}")
        elif key == "col_key" and (not isinstance(value, str) or col_index(value) is None):
            errors.append(f"Invalid column key: {value}")
        elif key in ("patch", "data") and not isinstance(value, dict):
            errors.append(f"'{key}' must be an object")
        elif key in ("layout", "type", "field") and not isinstance(value, str):
            errors.append(f"'{key}' must be a string")

    return errors


def dispatch(builder: Builder, name: str, params: dict[str, Any] | None = None) -> ActionResult:
    """
    Apply one action to a builder. Invalid actions are rejected without
    touching the builder.
    """
    errors = validate_action(name, params)
    if errors:
        logger.warning("actions: rejected %s: %s", name, "; ".join(errors))
        return ActionResult(applied=False, errors=errors)

    p = normalize_params(params)
    handler = _HANDLERS[name]
    value = handler(builder, p)
    applied = value is not None and value is not False
    return ActionResult(applied=applied, value=value)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _open_row_picker(b: Builder, p: dict[str, Any]) -> bool:
    b.open_row_picker()
    return True


def _close_picker(b: Builder, p: dict[str, Any]) -> bool:
    b.close_picker()
    return True


def _deselect(b: Builder, p: dict[str, Any]) -> bool:
    b.deselect()
    return True


def _array_edit(b: Builder, p: dict[str, Any], remove: bool) -> bool:
    """Add or remove an item of an ARRAY field on the selected component."""
    selection = b.selection
    instance = b.selected_component()
    if selection is None or instance is None:
        return False
    entry = b.registry.lookup(instance.get("type"))
    schema = next((f for f in entry.fields if f.name == p["field"]), None) if entry else None
    if schema is None or not schema.fields:
        return False

    data = dict(instance.get("data") or {})
    items = list(data.get(schema.name) or [])
    if remove:
        if p["item"] >= len(items):
            return False
        del items[p["item"]]
    else:
        items.append(new_array_item(schema))
    data[schema.name] = items
    return b.update_component_data(*selection, data)


_HANDLERS = {
    "open-row-picker": _open_row_picker,
    "pick-layout": lambda b, p: b.pick_layout(p["layout"]),
    "add-component": lambda b, p: b.add_component_to_column(p["row"], p["column"]),
    "pick-component": lambda b, p: b.pick_component(p["type"]),
    "close-picker": _close_picker,
    "row-settings": lambda b, p: b.update_row(p["row"], p["patch"]),
    "move-row": lambda b, p: b.move_row(p["row"], p["direction"]),
    "delete-row": lambda b, p: b.delete_row(p["row"]),
    "select-component": lambda b, p: b.select_component(p["row"], p["col_key"], p["index"]),
    "deselect": _deselect,
    "update-component-data": lambda b, p: b.update_component_data(p["row"], p["col_key"], p["index"], p["data"]),
    "duplicate-component": lambda b, p: b.duplicate_component(p["row"], p["col_key"], p["index"]),
    "move-component": lambda b, p: b.move_component(p["row"], p["col_key"], p["index"], p["direction"]),
    "delete-component": lambda b, p: b.delete_component(p["row"], p["col_key"], p["index"]),
    "add-array-item": lambda b, p: _array_edit(b, p, remove=False),
    "remove-array-item": lambda b, p: _array_edit(b, p, remove=True),
    "undo": lambda b, p: b.undo(),
    "redo": lambda b, p: b.redo(),
}
