"""Public page serving — GET /page/{slug} serves a page's rendered HTML."""

from __future__ import annotations

import hashlib
import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import HTMLResponse, Response

from api.config import settings
from api.models.page import PageResponse, SitemapEntry
from api.repos.page_repo import PageRepo, default_meta_title
from cms.kernel.registry import default_registry
from cms.kernel.renderer import render_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])
page_repo = PageRepo()
registry = default_registry()

_NOT_FOUND_HTML = "<html><body><h1>404 — Page not found</h1></body></html>"


def _cache_control() -> str:
    ttl = settings.PAGE_CACHE_SECONDS
    if ttl <= 0:
        return "no-cache"
    return f"public, max-age={ttl}, s-maxage={ttl * 12}, stale-while-revalidate=86400"


@router.get("/api/pages/sitemap", status_code=200)
async def sitemap() -> list[SitemapEntry]:
    """Active pages for sitemap generation."""
    pages = await page_repo.list_active()
    return [SitemapEntry(slug=p.slug, title=p.title, lastModified=p.updated_at) for p in pages]


@router.get("/api/pages/{slug}", status_code=200)
async def get_public_page(slug: str) -> PageResponse:
    """An active page as JSON. Inactive and missing pages are both 404."""
    page = await page_repo.get_active_by_slug(slug)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return PageResponse.from_model(page)


@router.get("/page/{slug}", response_class=HTMLResponse)
async def serve_page(slug: str) -> Response:
    """
    Serve an active page rendered in display mode.

    Cache headers:
    - Cache-Control: public, PAGE_CACHE_SECONDS browser TTL, 12x CDN TTL
    - ETag: MD5 of the HTML content for conditional requests
    """
    page = await page_repo.get_active_by_slug(slug)
    if page is None:
        return HTMLResponse(content=_NOT_FOUND_HTML, status_code=404)

    html = render_page(
        page.content_json,
        registry,
        title=page.meta_title or default_meta_title(page.title),
        meta_description=page.meta_description or "",
    )
    html_bytes = html.encode("utf-8")
    etag = f'"{hashlib.md5(html_bytes, usedforsecurity=False).hexdigest()}"'

    return Response(
        content=html_bytes,
        media_type="text/html; charset=utf-8",
        headers={
            "Cache-Control": _cache_control(),
            "ETag": etag,
            "X-Content-Type-Options": "nosniff",
        },
    )
