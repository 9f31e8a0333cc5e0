"""
LeeCMS Kernel — the pure page-builder engine.

Components:
  registry   — component type → fields, template, category
  layouts    — row layout id → columns
  renderer   — (content tree, mode, registry) → HTML  (pure, deterministic)
  builder    — editing session: structural ops, undo/redo, save
  actions    — renderer `data-action` hooks → builder calls
  assembly   — coordinates storage + builder + renderer (IO lives here)
"""

from cms.kernel.actions import dispatch, validate_action
from cms.kernel.assembly import MemoryStorage, PageAssembly, PageNotFound, PageStorage, StorageError
from cms.kernel.builder import Builder
from cms.kernel.layouts import LAYOUT_CHOICES, columns_for
from cms.kernel.registry import ComponentRegistry, default_registry
from cms.kernel.renderer import render, render_page

__all__ = [
    "Builder",
    "ComponentRegistry",
    "default_registry",
    "columns_for",
    "LAYOUT_CHOICES",
    "render",
    "render_page",
    "validate_action",
    "dispatch",
    "PageAssembly",
    "PageStorage",
    "MemoryStorage",
    "PageNotFound",
    "StorageError",
]
