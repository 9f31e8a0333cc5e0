"""Builder catalog and render routes — component picker, layout picker, side panel, live render."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from api.models.page import ComponentFormRequest, RenderRequest, RenderResponse
from cms.kernel.layouts import LAYOUT_CHOICES
from cms.kernel.registry import default_registry
from cms.kernel.renderer import render, render_component_form

router = APIRouter(prefix="/api/admin/cms", tags=["cms"])
registry = default_registry()


@router.get("/components", status_code=200)
async def list_components() -> list[dict[str, Any]]:
    """Component picker catalog, grouped by category in registration order."""
    return registry.catalog()


@router.post("/components/{component_type}/form", status_code=200)
async def component_form(component_type: str, req: ComponentFormRequest) -> RenderResponse:
    """Side-panel editor form for one instance of `component_type`."""
    if component_type not in registry:
        raise HTTPException(status_code=404, detail="Unknown component type.")
    data = {**registry.default_data(component_type), **req.data}
    return RenderResponse(html=render_component_form({"type": component_type, "data": data}, registry))


@router.get("/layouts", status_code=200)
async def list_layouts() -> list[dict[str, str]]:
    """Row layout picker choices."""
    return [choice.to_dict() for choice in LAYOUT_CHOICES]


@router.post("/render", status_code=200)
async def render_tree(req: RenderRequest) -> RenderResponse:
    """Render an unsaved tree, e.g. the builder's live tree after an edit."""
    return RenderResponse(html=render(req.content_json, req.mode, registry))
