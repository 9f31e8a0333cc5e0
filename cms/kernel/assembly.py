"""
LeeCMS Kernel — Assembly Layer

Sits between the pure functions (registry, renderer, builder) and the
outside world (Postgres, the admin API). Coordinates the lifecycle of a
page's content tree.

Operations: load, save, open_builder, render_display, render_preview

This is where IO happens. The renderer and builder are pure apart from the
save callback this layer hands the builder.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from typing import Any

from cms.kernel.builder import Builder
from cms.kernel.registry import ComponentRegistry
from cms.kernel.renderer import render, render_page
from cms.kernel.types import ConfirmCallback, PageFile, RenderMode, RenderOptions

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class PageNotFound(Exception):
    """Page does not exist in storage."""
    pass


class StorageError(Exception):
    """The storage backend failed to read or write a page."""
    pass


# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------

class PageStorage:
    """
    Abstract storage interface (the loadPage / savePage collaborators).
    Implement with Postgres or the admin HTTP API for production, or in
    memory for tests.
    """

    async def load(self, identifier: str) -> PageFile | None:
        """Fetch a page's content tree and metadata. Returns None if not found."""
        raise NotImplementedError

    async def save(self, identifier: str, tree: list[dict[str, Any]]) -> None:
        """Write a page's content tree."""
        raise NotImplementedError


class MemoryStorage(PageStorage):
    """In-memory storage for testing."""

    def __init__(self) -> None:
        self.pages: dict[str, PageFile] = {}
        self.saves: list[tuple[str, list[dict[str, Any]]]] = []

    def seed(self, identifier: str, tree: Any, **metadata: Any) -> None:
        self.pages[identifier] = PageFile(identifier, tree, dict(metadata))

    async def load(self, identifier: str) -> PageFile | None:
        page = self.pages.get(identifier)
        return copy.deepcopy(page) if page else None

    async def save(self, identifier: str, tree: list[dict[str, Any]]) -> None:
        tree = copy.deepcopy(tree)
        self.saves.append((identifier, tree))
        page = self.pages.get(identifier)
        if page is None:
            self.pages[identifier] = PageFile(identifier, tree, {})
        else:
            page.content_tree = tree


def parse_content_tree(raw: Any) -> list[dict[str, Any]]:
    """
    Stored content → content tree. Accepts the decoded list or its JSON text.
    Anything that is not a list (or does not decode to one) becomes [].
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("assembly: content_json is not valid JSON, treating as empty")
            return []
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("assembly: content tree is %s, not a list; treating as empty", type(raw).__name__)
        return []
    return raw


# ---------------------------------------------------------------------------
# Assembly class
# ---------------------------------------------------------------------------

class PageAssembly:
    """
    Manages the lifecycle of a page's content tree.
    Coordinates storage + builder + renderer.
    """

    def __init__(self, storage: PageStorage, registry: ComponentRegistry):
        self._storage = storage
        self.registry = registry
        self._locks: dict[str, asyncio.Lock] = {}

    def _get_lock(self, identifier: str) -> asyncio.Lock:
        """Per-page lock so saves of one page reach storage in order."""
        if identifier not in self._locks:
            self._locks[identifier] = asyncio.Lock()
        return self._locks[identifier]

    # -- load --

    async def load(self, identifier: str) -> PageFile:
        """Read a page from storage. Malformed trees come back as []."""
        page = await self._storage.load(identifier)
        if page is None:
            raise PageNotFound(identifier)
        page.content_tree = parse_content_tree(page.content_tree)
        return page

    # -- save --

    async def save(self, identifier: str, tree: list[dict[str, Any]]) -> None:
        async with self._get_lock(identifier):
            await self._storage.save(identifier, copy.deepcopy(tree))

    # -- open_builder --

    async def open_builder(
        self,
        identifier: str,
        *,
        confirm: ConfirmCallback | None = None,
    ) -> Builder:
        """
        Load a page and start an editing session on it.
        The builder's save() writes back through this assembly.
        """
        page = await self.load(identifier)

        async def on_save(tree: list[dict[str, Any]]) -> None:
            await self.save(identifier, tree)

        return Builder(page.content_tree, self.registry, on_save=on_save, confirm=confirm)

    # -- render --

    async def render_display(self, identifier: str, options: RenderOptions | None = None) -> str:
        """Full public HTML document for a stored page."""
        page = await self.load(identifier)
        meta = page.metadata
        return render_page(
            page.content_tree,
            self.registry,
            title=meta.get("meta_title") or meta.get("title") or "",
            meta_description=meta.get("meta_description") or "",
            options=options,
        )

    def render_preview(self, tree: Any, mode: RenderMode | str = RenderMode.EDIT) -> str:
        """Render an unsaved tree, e.g. a builder's live tree."""
        return render(parse_content_tree(tree), mode, self.registry)
