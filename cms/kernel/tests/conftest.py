"""
LeeCMS kernel test configuration.

Kernel tests are function-scoped and use MemoryStorage; PostgresStorage tests
skip themselves when DATABASE_URL is not set.

Two registries are available:
- registry: the standard storefront catalog
- tiny_registry: a two-type fixture registry, to show nothing reaches for a
  global catalog
"""

import pytest

from cms.kernel.registry import ComponentRegistry, default_registry
from cms.kernel.types import FieldKind, FieldSchema, RegistryEntry


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def tiny_registry():
    return ComponentRegistry(
        [
            RegistryEntry(
                type="greeting",
                display_name="Greeting",
                description="Says hello",
                icon="👋",
                category="Fixtures",
                fields=(
                    FieldSchema("name", FieldKind.TEXT, "World"),
                    FieldSchema("loud", FieldKind.CHECKBOX, False),
                ),
                template="<p class=\"greeting\">Hello, {{name}}{{#loud}}!{{/loud}}</p>",
            ),
            RegistryEntry(
                type="divider",
                display_name="Divider",
                description="Horizontal rule",
                icon="➖",
                category="Fixtures",
                fields=(),
                template="<hr class=\"divider\">",
            ),
        ]
    )


@pytest.fixture
def make_row():
    """Row factory: make_row("50-50", col_1=[...], id="row_a")."""

    def _make(layout="100", id="row_test", **columns):
        return {
            "id": id,
            "layout": layout,
            "components": dict(columns),
            "backgroundColor": "transparent",
            "padding": "1rem",
            "marginTop": "0",
            "marginBottom": "2rem",
        }

    return _make


@pytest.fixture
def make_instance():
    """Component instance factory: make_instance("text-block", content="Hi")."""

    def _make(type, id=None, **data):
        return {"id": id or f"component_{type}", "type": type, "data": data}

    return _make


@pytest.fixture
def make_builder(registry):
    """Builder factory over the standard registry: make_builder(tree, on_save=..., confirm=...)."""
    from cms.kernel.builder import Builder

    def _make(tree=None, **kwargs):
        return Builder([] if tree is None else tree, registry, **kwargs)

    return _make
