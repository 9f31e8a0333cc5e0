"""
PostgresStorage adapter for LeeCMS kernel assembly layer.

Implements the PageStorage protocol using Postgres as the backend.
Content trees live in pages.content_json (JSONB). Values cross the wire as
JSON text so the adapter works with or without a JSONB type codec on the
pool.
"""

from __future__ import annotations

import json
from typing import Any

import asyncpg

from cms.kernel.assembly import PageNotFound, PageStorage, parse_content_tree
from cms.kernel.types import PageFile

_SELECT_PAGE = """
    SELECT
        p.id, p.title, p.slug, p.type,
        p.content_json::text AS content_json,
        p.page_category_id,
        pc.name AS category_name,
        pc.slug AS category_slug,
        p.meta_title, p.meta_description,
        p.is_active, p.sort_order,
        p.created_at, p.updated_at
    FROM pages p
    LEFT JOIN page_categories pc ON p.page_category_id = pc.id
"""


class PostgresStorage(PageStorage):
    """
    Postgres-based storage for page content trees.

    Identifiers are page ids; a non-numeric identifier is looked up as a slug.
    """

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def load(self, identifier: str) -> PageFile | None:
        """Fetch a page's content tree and metadata. Returns None if not found."""
        async with self.pool.acquire() as conn:
            if str(identifier).isdigit():
                row = await conn.fetchrow(_SELECT_PAGE + " WHERE p.id = $1", int(identifier))
            else:
                row = await conn.fetchrow(_SELECT_PAGE + " WHERE p.slug = $1", str(identifier))
        if row is None:
            return None

        metadata: dict[str, Any] = dict(row)
        raw = metadata.pop("content_json")
        return PageFile(
            identifier=str(row["id"]),
            content_tree=parse_content_tree(raw),
            metadata=metadata,
        )

    async def save(self, identifier: str, tree: list[dict[str, Any]]) -> None:
        """Write a page's content tree. Raises PageNotFound if no row matches."""
        column, key = ("id", int(identifier)) if str(identifier).isdigit() else ("slug", str(identifier))
        async with self.pool.acquire() as conn:
            # column is one of two literals above
            result = await conn.execute(
                f"UPDATE pages SET content_json = $1::text::jsonb, updated_at = now() WHERE {column} = $2",  # noqa: S608
                json.dumps(tree),
                key,
            )
        if result.endswith(" 0"):
            raise PageNotFound(identifier)

    async def close(self) -> None:
        """Close the connection pool."""
        await self.pool.close()
