"""
LeeCMS Kernel — Shared Types

Data classes and constants used across the registry, renderer, builder and
assembly. These are the contracts that bind the kernel together.

The content tree itself stays a plain list of dicts (the persisted JSON
shape), so snapshots can be stored, diffed and deep-copied without a
conversion layer:

    ContentTree := Row[]
    Row := {id, layout, components: {col_1: [...], ...},
            backgroundColor, padding, marginTop, marginBottom}
    ComponentInstance := {id, type, data}
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Layouts
# ---------------------------------------------------------------------------

DEFAULT_LAYOUT = "100"

LAYOUT_IDS: tuple[str, ...] = ("100", "50-50", "70-30", "30-70", "33-33-33")

# ---------------------------------------------------------------------------
# Row presentation
# ---------------------------------------------------------------------------

DEFAULT_ROW_STYLE: dict[str, str] = {
    "backgroundColor": "transparent",
    "padding": "1rem",
    "marginTop": "0",
    "marginBottom": "2rem",
}

# Named spacing tokens accepted in padding / margin attributes
SPACING_TOKENS: dict[str, str] = {
    "None": "0",
    "Small": "1rem",
    "Medium": "2rem",
    "Large": "3rem",
    "Extra Large": "4rem",
}

DIRECTIONS: set[str] = {"up", "down"}


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RenderMode(str, Enum):
    EDIT = "edit"
    DISPLAY = "display"


class FieldKind(str, Enum):
    """Closed set of editor input kinds a registry field may declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    ARRAY = "array"
    HTML = "html"


class BuilderState(str, Enum):
    IDLE = "idle-editing"
    ROW_PICKER = "row-layout-picker-open"
    COMPONENT_PICKER = "component-picker-open"
    EDITING_FIELDS = "editing-component-fields"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Column:
    """One resolved column of a row layout."""

    width_token: str
    label: str


@dataclass(frozen=True)
class LayoutChoice:
    """An entry in the row-layout picker."""

    id: str
    name: str
    description: str
    icon: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class FieldSchema:
    """
    One editable field of a component type.

    `fields` is only meaningful for ARRAY kinds: it describes the shape of
    each object in the list. `options` maps stored value → label for SELECT.
    """

    name: str
    kind: FieldKind
    default: Any = None
    label: str = ""
    options: tuple[tuple[str, str], ...] = ()
    fields: tuple[FieldSchema, ...] = ()

    @property
    def display_label(self) -> str:
        return self.label or self.name

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "label": self.display_label,
            "default": self.default,
        }
        if self.options:
            d["options"] = [{"value": v, "label": lbl} for v, lbl in self.options]
        if self.fields:
            d["fields"] = [f.to_dict() for f in self.fields]
        return d


@dataclass(frozen=True)
class RegistryEntry:
    """
    A registered component type.

    `template` is a Mustache template rendered against the instance's data
    (after `prepare`, when set, derives extra view values from it).
    """

    type: str
    display_name: str
    description: str
    icon: str
    category: str
    fields: tuple[FieldSchema, ...]
    template: str
    prepare: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.display_name,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class RenderOptions:
    """Options controlling what the renderer includes in output."""

    include_styles: bool = True
    container_class: str = "leecms-content"
    footer: str | None = None
    lang: str = "en"


@dataclass
class PageFile:
    """A loaded page: its content tree plus whatever metadata storage keeps."""

    identifier: str
    content_tree: list[dict[str, Any]]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SaveResult:
    """Outcome of Builder.save(). Failures never raise out of save()."""

    ok: bool
    error: str | None = None


SaveCallback = Callable[[list[dict[str, Any]]], Awaitable[None]]
ConfirmCallback = Callable[[str], bool]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_id_counter = itertools.count()
_last_ms = 0


def _timestamp_id(prefix: str) -> str:
    """
    `<prefix>_<epoch ms>`, with a `_<n>` suffix when called more than once
    in the same millisecond.
    """
    global _last_ms, _id_counter
    ms = int(time.time() * 1000)
    if ms != _last_ms:
        _last_ms = ms
        _id_counter = itertools.count()
    n = next(_id_counter)
    return f"{prefix}_{ms}" if n == 0 else f"{prefix}_{ms}_{n}"


def new_row_id() -> str:
    return _timestamp_id("row")


def new_component_id() -> str:
    return _timestamp_id("component")
