"""
LeeCMS Kernel — Row/Column Layout Resolver

Pure lookups over a fixed table of five layouts. Unknown identifiers resolve
to the single-column default; there is no other failure mode.
"""

from __future__ import annotations

import re
from typing import Any

from cms.kernel.types import DEFAULT_LAYOUT, Column, LayoutChoice

_COLUMNS: dict[str, tuple[Column, ...]] = {
    "100": (Column("w-full", "Column 1"),),
    "50-50": (
        Column("w-1/2", "Column 1"),
        Column("w-1/2", "Column 2"),
    ),
    "70-30": (
        Column("w-7/10", "Column 1 (70%)"),
        Column("w-3/10", "Column 2 (30%)"),
    ),
    "30-70": (
        Column("w-3/10", "Column 1 (30%)"),
        Column("w-7/10", "Column 2 (70%)"),
    ),
    "33-33-33": (
        Column("w-1/3", "Column 1"),
        Column("w-1/3", "Column 2"),
        Column("w-1/3", "Column 3"),
    ),
}

LAYOUT_CHOICES: tuple[LayoutChoice, ...] = (
    LayoutChoice("100", "Single Column", "100%", "█"),
    LayoutChoice("50-50", "Two Columns Equal", "50% | 50%", "█ █"),
    LayoutChoice("70-30", "Two Columns Left Heavy", "70% | 30%", "██ █"),
    LayoutChoice("30-70", "Two Columns Right Heavy", "30% | 70%", "█ ██"),
    LayoutChoice("33-33-33", "Three Columns Equal", "33% | 33% | 33%", "█ █ █"),
)

_COL_KEY_RE = re.compile(r"^col_([1-9][0-9]*)$")


def is_known_layout(layout_id: Any) -> bool:
    return isinstance(layout_id, str) and layout_id in _COLUMNS


def normalize_layout(layout_id: Any) -> str:
    """Return layout_id if recognized, else the single-column default."""
    return layout_id if is_known_layout(layout_id) else DEFAULT_LAYOUT


def columns_for(layout_id: Any) -> list[Column]:
    """Ordered column descriptors for a layout (fresh list each call)."""
    return list(_COLUMNS[normalize_layout(layout_id)])


def column_count(layout_id: Any) -> int:
    return len(_COLUMNS[normalize_layout(layout_id)])


def col_key(index: int) -> str:
    """Zero-based column index → persisted column key ("col_1", ...)."""
    return f"col_{index + 1}"


def col_index(key: str) -> int | None:
    """Persisted column key → zero-based index, or None if not a column key."""
    match = _COL_KEY_RE.match(key) if isinstance(key, str) else None
    return int(match.group(1)) - 1 if match else None


def layout_label(layout_id: Any) -> str:
    """Human label used in the editor row header, e.g. "50 / 50"."""
    return normalize_layout(layout_id).replace("-", " / ")
