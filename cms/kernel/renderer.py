"""
LeeCMS Kernel — Renderer

Pure function: (content tree, mode, registry) → HTML string.
No IO. Deterministic: same input → same output, always.

Two modes share one code path so the editor shows exactly the content the
public page will:
- display: rows → columns → component markup
- edit:    the same markup, wrapped with affordances. Affordances are inert
           `data-action` hooks; the builder (via cms.kernel.actions) owns
           every state change.

Defensive by contract: a non-list tree, non-dict rows, missing column keys
and unknown component types never raise.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Any

import chevron

from cms.kernel.fields import render_field_form
from cms.kernel.layouts import col_key, columns_for, layout_label
from cms.kernel.registry import ComponentRegistry
from cms.kernel.types import (
    DEFAULT_ROW_STYLE,
    SPACING_TOKENS,
    RenderMode,
    RenderOptions,
)

logger = logging.getLogger(__name__)

EMPTY_DISPLAY_HTML = (
    '<div class="leecms-empty">'
    "<h2>No Content Available</h2>"
    "<p>This page doesn't have any content yet.</p>"
    "</div>"
)

EMPTY_EDIT_HTML = (
    '<div class="leecms-empty">'
    "<h2>Start Building Your Page</h2>"
    "<p>Add your first row to begin creating content</p>"
    '<button type="button" data-action="open-row-picker">Add Your First Row</button>'
    "</div>"
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render(
    tree: Any,
    mode: RenderMode | str,
    registry: ComponentRegistry,
    options: RenderOptions | None = None,
) -> str:
    """
    Render a content tree to an HTML fragment.
    Empty or malformed trees render the "no content" placeholder.
    """
    mode = RenderMode(mode)
    opts = options or RenderOptions()

    rows = _indexed_rows(tree)
    if not rows:
        return EMPTY_EDIT_HTML if mode is RenderMode.EDIT else EMPTY_DISPLAY_HTML

    parts = [render_row(row, index, mode, registry, row_count=len(tree)) for index, row in rows]
    css_class = escape(opts.container_class, quote=True)
    return f'<div class="{css_class}" data-mode="{mode.value}">' + "\n".join(parts) + "</div>"


def render_row(
    row: dict[str, Any],
    index: int,
    mode: RenderMode | str,
    registry: ComponentRegistry,
    row_count: int | None = None,
) -> str:
    """Render one row. `index` is the row's position in the tree."""
    mode = RenderMode(mode)
    editing = mode is RenderMode.EDIT
    columns = columns_for(row.get("layout"))
    components = row.get("components")
    if not isinstance(components, dict):
        components = {}

    col_parts = []
    for ci, column in enumerate(columns):
        key = col_key(ci)
        instances = components.get(key)
        if not isinstance(instances, list):
            instances = []

        rendered = []
        for ii, instance in enumerate(instances):
            html = render_component(instance, registry)
            if editing:
                html = _wrap_component_edit(instance, html, index, key, ii, len(instances))
            if html:
                rendered.append(html)

        inner = "".join(rendered)
        if editing:
            inner = (
                f'<span class="leecms-column-label">{escape(column.label)}</span>'
                f"{inner}"
                f'<button type="button" data-action="add-component" data-row="{index}" '
                f'data-column="{ci}">Add Component</button>'
            )
        col_parts.append(f'<div class="leecms-column {column.width_token}" data-col-key="{key}">{inner}</div>')

    flex = "leecms-columns flex-wrap" if len(columns) == 3 else "leecms-columns"
    body = f'<div class="{flex}">{"".join(col_parts)}</div>'
    style = escape(row_style(row), quote=True)
    row_id = escape(str(row.get("id", f"row-{index}")), quote=True)

    if not editing:
        return f'<section class="leecms-row" id="{row_id}" style="{style}">{body}</section>'

    count = row_count if row_count is not None else index + 1
    header = _row_controls(row, index, len(columns), count)
    return (
        f'<section class="leecms-row leecms-row-editor" id="{row_id}" data-row="{index}">'
        f'{header}<div class="leecms-row-body" style="{style}">{body}</div></section>'
    )


def render_component(instance: Any, registry: ComponentRegistry) -> str:
    """
    Render one component instance through its registry entry.
    Returns "" for malformed instances and unregistered types.
    """
    if not isinstance(instance, dict):
        return ""
    type = instance.get("type")
    entry = registry.lookup(type)
    if entry is None:
        logger.debug("renderer: skipping unknown component type %r", type)
        return ""

    data = instance.get("data")
    view = registry.default_data(entry.type)
    if isinstance(data, dict):
        view.update(data)
    if entry.prepare is not None:
        view = entry.prepare(view)
    return chevron.render(entry.template, view)


def render_component_form(instance: Any, registry: ComponentRegistry) -> str:
    """Side-panel editor form for one instance; "" for unknown types."""
    if not isinstance(instance, dict):
        return ""
    entry = registry.lookup(instance.get("type"))
    if entry is None:
        return ""
    title = escape(f"{entry.icon} {entry.display_name}")
    return f'<aside class="leecms-editor-panel"><h3>{title}</h3>{render_field_form(entry.fields, instance.get("data"))}</aside>'


def row_style(row: dict[str, Any]) -> str:
    """Inline CSS for a row's presentation attributes."""
    background = row.get("backgroundColor") or DEFAULT_ROW_STYLE["backgroundColor"]
    padding = spacing_value(row.get("padding"), DEFAULT_ROW_STYLE["padding"])
    margin_top = spacing_value(row.get("marginTop"), DEFAULT_ROW_STYLE["marginTop"])
    margin_bottom = spacing_value(row.get("marginBottom"), DEFAULT_ROW_STYLE["marginBottom"])
    return (
        f"background-color: {background}; padding: {padding}; "
        f"margin-top: {margin_top}; margin-bottom: {margin_bottom}"
    )


def spacing_value(value: Any, default: str) -> str:
    """Named spacing token or CSS length → CSS length."""
    if not isinstance(value, str) or not value:
        return default
    return SPACING_TOKENS.get(value, value)


# ---------------------------------------------------------------------------
# Full page (public display)
# ---------------------------------------------------------------------------

BASE_CSS = """
*, *::before, *::after { box-sizing: border-box; }
body { margin: 0; font-family: system-ui, sans-serif; line-height: 1.6; }
.leecms-content { max-width: 1200px; margin: 0 auto; padding: 2rem 1rem 0; }
.leecms-columns { display: flex; gap: 3rem; }
.leecms-columns.flex-wrap { flex-wrap: wrap; }
.leecms-column { min-height: 20px; }
.w-full { width: 100%; }
.w-1\\/2 { width: 50%; }
.w-1\\/3 { width: 33.333%; }
.w-3\\/10 { width: 30%; }
.w-7\\/10 { width: 70%; }
.text-left { text-align: left; }
.text-center { text-align: center; }
.text-right { text-align: right; }
.text-justify { text-align: justify; }
.leecms-empty { text-align: center; color: #888; padding: 4rem 1rem; }
.leecms-footer { margin-top: 48px; font-size: 12px; color: #aaa; text-align: center; }
@media (max-width: 1024px) {
  .leecms-columns { flex-wrap: wrap; }
  .leecms-column { width: 100%; }
}
"""


def render_page(
    tree: Any,
    registry: ComponentRegistry,
    *,
    title: str = "",
    meta_description: str = "",
    options: RenderOptions | None = None,
) -> str:
    """Complete HTML document for a page in display mode."""
    opts = options or RenderOptions()
    parts: list[str] = []

    parts.append("<!DOCTYPE html>")
    parts.append(f'<html lang="{escape(opts.lang, quote=True)}">')
    parts.append("<head>")
    parts.append('  <meta charset="utf-8">')
    parts.append('  <meta name="viewport" content="width=device-width, initial-scale=1">')
    parts.append(f"  <title>{escape(title)}</title>")
    if meta_description:
        parts.append(f'  <meta name="description" content="{escape(meta_description, quote=True)}">')
    if opts.include_styles:
        parts.append("  <style>")
        parts.append(BASE_CSS.strip())
        parts.append("  </style>")
    parts.append("</head>")
    parts.append("<body>")
    parts.append("  <main>")
    parts.append(render(tree, RenderMode.DISPLAY, registry, opts))
    parts.append("  </main>")
    if opts.footer:
        parts.append(f'  <footer class="leecms-footer">{escape(opts.footer)}</footer>')
    parts.append("</body>")
    parts.append("</html>")

    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Edit-mode affordances
# ---------------------------------------------------------------------------


def _indexed_rows(tree: Any) -> list[tuple[int, dict[str, Any]]]:
    if not isinstance(tree, list):
        return []
    return [(i, row) for i, row in enumerate(tree) if isinstance(row, dict)]


def _button(action: str, label: str, attrs: dict[str, Any], disabled: bool = False) -> str:
    data = "".join(f' data-{k}="{escape(str(v), quote=True)}"' for k, v in attrs.items())
    off = " disabled" if disabled else ""
    return f'<button type="button" data-action="{action}"{data}{off}>{label}</button>'


def _row_controls(row: dict[str, Any], index: int, n_columns: int, row_count: int) -> str:
    plural = "s" if n_columns > 1 else ""
    attrs = {"row": index}
    return (
        '<div class="leecms-row-controls">'
        f"<span>Row {index + 1} ({escape(layout_label(row.get('layout')))})</span>"
        f"<span>{n_columns} column{plural}</span>"
        + _button("row-settings", "Settings", attrs)
        + _button("move-row", "Move Up", {**attrs, "direction": "up"}, disabled=index == 0)
        + _button("move-row", "Move Down", {**attrs, "direction": "down"}, disabled=index >= row_count - 1)
        + _button("delete-row", "Delete Row", attrs)
        + "</div>"
    )


def _wrap_component_edit(
    instance: Any,
    html: str,
    row_index: int,
    key: str,
    index: int,
    count: int,
) -> str:
    attrs = {"row": row_index, "col-key": key, "index": index}
    if not html:
        # Unregistered types get a placeholder in the editor so they can be removed.
        if not isinstance(instance, dict):
            return ""
        type = escape(str(instance.get("type")))
        return (
            '<div class="leecms-component leecms-component-unknown">'
            f"<p>Unknown component type: {type}</p>"
            + _button("delete-component", "Delete", attrs)
            + "</div>"
        )
    component_id = escape(str(instance.get("id", "")), quote=True)
    type = escape(str(instance.get("type", "")), quote=True)
    controls = (
        '<div class="leecms-component-controls">'
        + _button("select-component", "Edit", attrs)
        + _button("duplicate-component", "Duplicate", attrs)
        + _button("move-component", "Move Up", {**attrs, "direction": "up"}, disabled=index == 0)
        + _button("move-component", "Move Down", {**attrs, "direction": "down"}, disabled=index >= count - 1)
        + _button("delete-component", "Delete", attrs)
        + "</div>"
    )
    return (
        f'<div class="leecms-component" data-component-id="{component_id}" data-type="{type}">'
        f"{controls}{html}</div>"
    )
