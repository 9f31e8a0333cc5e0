"""
Pydantic models for LeeCMS.

All data shapes defined here. No imports from db, repos, or routes.
"""

from api.models.page import (
    CreatePageRequest,
    DeletePageResponse,
    Page,
    PageResponse,
    PageSummary,
    RenderRequest,
    RenderResponse,
    SitemapEntry,
    UpdatePageRequest,
)

__all__ = [
    # Page models
    "Page",
    "CreatePageRequest",
    "UpdatePageRequest",
    "PageResponse",
    "PageSummary",
    "SitemapEntry",
    "DeletePageResponse",
    # Render models
    "RenderRequest",
    "RenderResponse",
]
