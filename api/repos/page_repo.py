"""Repository for page operations."""

from __future__ import annotations

from datetime import UTC, datetime

import asyncpg

from api.config import settings
from api.db import system_conn
from api.models.page import CreatePageRequest, Page, UpdatePageRequest
from cms.kernel.assembly import parse_content_tree

_SELECT = """
    SELECT
        p.*,
        pc.name AS category_name,
        pc.slug AS category_slug
    FROM pages p
    LEFT JOIN page_categories pc ON p.page_category_id = pc.id
"""


def _row_to_page(row: asyncpg.Record) -> Page:
    """Convert a database row to a Page model."""
    return Page(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        type=row["type"],
        content_json=parse_content_tree(row["content_json"]),
        page_category_id=row["page_category_id"],
        category_name=row["category_name"],
        category_slug=row["category_slug"],
        meta_title=row["meta_title"],
        meta_description=row["meta_description"],
        is_active=row["is_active"],
        sort_order=row["sort_order"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def default_meta_title(title: str) -> str:
    return f"{title} - {settings.SITE_NAME}"


class PageRepo:
    """All page-related database operations."""

    async def list_all(self) -> list[Page]:
        """
        List every page, grouped by category order then page order.

        Returns:
            List of Page objects
        """
        async with system_conn() as conn:
            rows = await conn.fetch(
                _SELECT + " ORDER BY pc.sort_order ASC NULLS LAST, p.sort_order ASC, p.title ASC"
            )
            return [_row_to_page(row) for row in rows]

    async def get(self, page_id: int) -> Page | None:
        """
        Get a page by ID.

        Args:
            page_id: Page ID

        Returns:
            Page if found, None otherwise
        """
        async with system_conn() as conn:
            row = await conn.fetchrow(_SELECT + " WHERE p.id = $1", page_id)
            return _row_to_page(row) if row else None

    async def get_active_by_slug(self, slug: str) -> Page | None:
        """Get an active page by slug. Inactive pages are invisible to the public site."""
        async with system_conn() as conn:
            row = await conn.fetchrow(_SELECT + " WHERE p.slug = $1 AND p.is_active = true", slug)
            return _row_to_page(row) if row else None

    async def list_active(self) -> list[Page]:
        """Active pages for the sitemap, most recently updated first."""
        async with system_conn() as conn:
            rows = await conn.fetch(_SELECT + " WHERE p.is_active = true ORDER BY p.updated_at DESC")
            return [_row_to_page(row) for row in rows]

    async def slug_taken(self, slug: str, exclude_id: int | None = None) -> bool:
        """
        Check whether another page already uses a slug.

        Args:
            slug: Slug to check
            exclude_id: Page ID to ignore (the page being updated)
        """
        async with system_conn() as conn:
            if exclude_id is None:
                row = await conn.fetchrow("SELECT id FROM pages WHERE slug = $1", slug)
            else:
                row = await conn.fetchrow("SELECT id FROM pages WHERE slug = $1 AND id != $2", slug, exclude_id)
            return row is not None

    async def category_exists(self, category_id: int) -> bool:
        async with system_conn() as conn:
            row = await conn.fetchrow("SELECT id FROM page_categories WHERE id = $1", category_id)
            return row is not None

    async def create(self, req: CreatePageRequest) -> Page:
        """
        Create a new page.

        Args:
            req: CreatePageRequest with page details

        Returns:
            Newly created Page
        """
        now = datetime.now(UTC)
        async with system_conn() as conn:
            page_id = await conn.fetchval(
                """
                INSERT INTO pages (
                    title, slug, type, page_category_id, content_json,
                    meta_title, meta_description, is_active, sort_order,
                    created_at, updated_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $10)
                RETURNING id
                """,
                req.title,
                req.slug,
                req.type,
                req.page_category_id,
                req.content_json,
                req.meta_title or default_meta_title(req.title),
                req.meta_description or "",
                req.is_active,
                req.sort_order,
                now,
            )
            row = await conn.fetchrow(_SELECT + " WHERE p.id = $1", page_id)
            return _row_to_page(row)

    async def update(self, page_id: int, req: UpdatePageRequest) -> Page | None:
        """
        Replace a page's editable fields and content tree.

        Args:
            page_id: Page ID
            req: UpdatePageRequest (already validated by the route)

        Returns:
            Updated Page if found, None otherwise
        """
        async with system_conn() as conn:
            updated = await conn.fetchval(
                """
                UPDATE pages
                SET title = $1, slug = $2, meta_title = $3, meta_description = $4,
                    page_category_id = $5, is_active = $6, sort_order = $7,
                    type = $8, content_json = $9, updated_at = $10
                WHERE id = $11
                RETURNING id
                """,
                req.title,
                req.slug,
                req.meta_title or default_meta_title(req.title),
                req.meta_description or "",
                req.page_category_id,
                req.is_active,
                req.sort_order,
                req.type,
                req.content_json,
                datetime.now(UTC),
                page_id,
            )
            if updated is None:
                return None
            row = await conn.fetchrow(_SELECT + " WHERE p.id = $1", page_id)
            return _row_to_page(row)

    async def delete(self, page_id: int) -> bool:
        """
        Delete a page.

        Returns:
            True if a page was deleted, False if it did not exist
        """
        async with system_conn() as conn:
            result = await conn.execute("DELETE FROM pages WHERE id = $1", page_id)
            return result == "DELETE 1"
