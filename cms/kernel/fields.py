"""
LeeCMS Kernel — Field Schema Dispatch

Everything that depends on a field's declared kind goes through here:
building default data for a new component instance, coercing submitted
values, and rendering the side-panel input widget. Dispatch is an exhaustive
`match` over FieldKind; adding a kind without handling it is a type error.
"""

from __future__ import annotations

import copy
from html import escape
from typing import Any, assert_never

from cms.kernel.types import FieldKind, FieldSchema

_TRUTHY = {"1", "true", "on", "yes"}


def default_data(fields: tuple[FieldSchema, ...]) -> dict[str, Any]:
    """
    Fresh data dict holding exactly one key per field, set to its default.
    Defaults are deep-copied so instances never share mutable values.
    """
    return {f.name: copy.deepcopy(f.default) for f in fields}


def new_array_item(field: FieldSchema) -> dict[str, Any]:
    """A blank item for an ARRAY field, built from its nested schema."""
    return default_data(field.fields)


def coerce_field_value(field: FieldSchema, value: Any) -> Any:
    """Normalize a submitted value to the type the field's kind stores."""
    match field.kind:
        case FieldKind.TEXT | FieldKind.TEXTAREA | FieldKind.HTML:
            return "" if value is None else str(value)
        case FieldKind.SELECT:
            allowed = {v for v, _ in field.options}
            text = "" if value is None else str(value)
            if allowed and text not in allowed:
                return copy.deepcopy(field.default)
            return text
        case FieldKind.CHECKBOX:
            if isinstance(value, str):
                return value.strip().lower() in _TRUTHY
            return bool(value)
        case FieldKind.ARRAY:
            if not isinstance(value, list):
                return []
            items = []
            for item in value:
                if not isinstance(item, dict):
                    continue
                if field.fields:
                    item = {
                        sub.name: coerce_field_value(sub, item.get(sub.name, sub.default))
                        for sub in field.fields
                    }
                items.append(item)
            return items
        case _:
            assert_never(field.kind)


def coerce_data(fields: tuple[FieldSchema, ...], data: dict[str, Any]) -> dict[str, Any]:
    """
    Coerce the declared fields present in `data`. Undeclared keys pass
    through untouched; missing fields are not filled in.
    """
    by_name = {f.name: f for f in fields}
    return {
        key: coerce_field_value(by_name[key], value) if key in by_name else copy.deepcopy(value)
        for key, value in data.items()
    }


def render_field_input(field: FieldSchema, value: Any, prefix: str = "") -> str:
    """
    HTML input widget for one field of the component editor panel.
    `prefix` namespaces nested names, e.g. "faqs.0." for array items.
    """
    name = escape(f"{prefix}{field.name}", quote=True)
    label = escape(field.display_label)

    match field.kind:
        case FieldKind.TEXT:
            control = f'<input type="text" name="{name}" value="{escape(_text(value), quote=True)}">'
        case FieldKind.TEXTAREA:
            control = f'<textarea name="{name}" rows="4">{escape(_text(value))}</textarea>'
        case FieldKind.HTML:
            control = (
                f'<textarea name="{name}" rows="8" data-editor="rich-text">'
                f"{escape(_text(value))}</textarea>"
            )
        case FieldKind.SELECT:
            opts = []
            for opt_value, opt_label in field.options:
                selected = " selected" if opt_value == value else ""
                opts.append(
                    f'<option value="{escape(opt_value, quote=True)}"{selected}>{escape(opt_label)}</option>'
                )
            control = f'<select name="{name}">{"".join(opts)}</select>'
        case FieldKind.CHECKBOX:
            checked = " checked" if value else ""
            control = f'<input type="checkbox" name="{name}" value="true"{checked}>'
        case FieldKind.ARRAY:
            items = value if isinstance(value, list) else []
            parts = []
            for i, item in enumerate(items):
                item = item if isinstance(item, dict) else {}
                inner = "".join(
                    render_field_input(sub, item.get(sub.name, sub.default), f"{prefix}{field.name}.{i}.")
                    for sub in field.fields
                )
                parts.append(
                    f'<fieldset class="leecms-array-item" data-index="{i}">{inner}'
                    f'<button type="button" data-action="remove-array-item" data-field="{name}" '
                    f'data-item="{i}">Remove</button></fieldset>'
                )
            parts.append(f'<button type="button" data-action="add-array-item" data-field="{name}">Add</button>')
            control = f'<div class="leecms-array" data-field="{name}">{"".join(parts)}</div>'
        case _:
            assert_never(field.kind)

    return f'<label class="leecms-field leecms-field-{field.kind.value}"><span>{label}</span>{control}</label>'


def render_field_form(fields: tuple[FieldSchema, ...], data: dict[str, Any]) -> str:
    """The whole editor form for one component instance."""
    data = data if isinstance(data, dict) else {}
    inputs = "".join(render_field_input(f, data.get(f.name, f.default)) for f in fields)
    return f'<form class="leecms-component-form">{inputs}</form>'


def _text(value: Any) -> str:
    return "" if value is None else str(value)
