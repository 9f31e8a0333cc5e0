"""Admin page routes — list, create, get, update (builder save), delete, preview."""

from __future__ import annotations

import logging
import re
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse

from api import db
from api.models.page import (
    CreatePageRequest,
    DeletePageResponse,
    PageResponse,
    PageSummary,
    UpdatePageRequest,
)
from api.repos.page_repo import PageRepo
from cms.kernel.assembly import PageAssembly, PageNotFound
from cms.kernel.postgres_storage import PostgresStorage
from cms.kernel.registry import default_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/pages", tags=["admin-pages"])
page_repo = PageRepo()
registry = default_registry()

SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def get_assembly() -> PageAssembly:
    """Page assembly over the shared Postgres pool."""
    return PageAssembly(PostgresStorage(db.get_pool()), registry)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.get("", status_code=200)
async def list_pages() -> list[PageSummary]:
    """All pages, ordered by category then page sort order."""
    pages = await page_repo.list_all()
    return [PageSummary.from_model(p) for p in pages]


@router.post("", status_code=201)
async def create_page(req: CreatePageRequest) -> PageResponse:
    """Create a page. Slugs are unique; the category, when given, must exist."""
    if not req.title.strip() or not req.slug:
        raise _bad_request("Title and slug are required.")
    if not SLUG_RE.match(req.slug):
        raise _bad_request("Slug may contain only lowercase letters, numbers and hyphens.")
    if await page_repo.slug_taken(req.slug):
        raise _bad_request("A page with this slug already exists.")
    if req.page_category_id is not None and not await page_repo.category_exists(req.page_category_id):
        raise _bad_request("Invalid page category.")

    page = await page_repo.create(req)
    logger.info("admin_pages: created page %s (%s)", page.id, page.slug)
    return PageResponse.from_model(page)


@router.get("/{page_id}", status_code=200)
async def get_page(page_id: int) -> PageResponse:
    """A single page with its content tree."""
    page = await page_repo.get(page_id)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return PageResponse.from_model(page)


@router.put("/{page_id}", status_code=200)
async def update_page(page_id: int, req: UpdatePageRequest) -> PageResponse:
    """
    Update a page and its content tree.

    This is the builder's save target. Title, slug and a valid category are
    required; the slug must not belong to another page.
    """
    if not req.title.strip() or not req.slug or req.page_category_id is None:
        raise _bad_request("Title, slug, and a valid category are required.")
    if not SLUG_RE.match(req.slug):
        raise _bad_request("Slug may contain only lowercase letters, numbers and hyphens.")
    if await page_repo.slug_taken(req.slug, exclude_id=page_id):
        raise _bad_request("Slug already exists.")

    page = await page_repo.update(page_id, req)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    logger.info("admin_pages: saved page %s (%d rows)", page_id, len(req.content_json))
    return PageResponse.from_model(page)


@router.delete("/{page_id}", status_code=200)
async def delete_page(page_id: int) -> DeletePageResponse:
    """Delete a page."""
    deleted = await page_repo.delete(page_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    logger.info("admin_pages: deleted page %s", page_id)
    return DeletePageResponse(id=page_id)


@router.get("/{page_id}/preview", response_class=HTMLResponse)
async def preview_page(
    page_id: int,
    mode: Literal["edit", "display"] = Query(default="edit"),
    assembly: PageAssembly = Depends(get_assembly),
) -> HTMLResponse:
    """The stored content tree rendered as an HTML fragment, with or without edit affordances."""
    try:
        page = await assembly.load(str(page_id))
    except PageNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.") from None
    return HTMLResponse(content=assembly.render_preview(page.content_tree, mode))
