"""Page models for the LeeCMS page builder."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class Page(BaseModel):
    """Core page model. Represents a row in the pages table (joined with its category)."""

    id: int
    title: str
    slug: str
    type: str = "leecms"
    content_json: list[dict[str, Any]] = Field(default_factory=list)
    page_category_id: int | None = None
    category_name: str | None = None
    category_slug: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    is_active: bool = True
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime


class CreatePageRequest(BaseModel):
    """What the client sends to create a page."""

    model_config = {"extra": "forbid"}

    title: str = ""
    slug: str = ""
    type: Literal["leecms", "static"] = "leecms"
    page_category_id: int | None = None
    content_json: list[dict[str, Any]] = Field(default_factory=list)
    meta_title: str | None = Field(default=None, max_length=200)
    meta_description: str | None = Field(default=None, max_length=500)
    is_active: bool = True
    sort_order: int = 0


class UpdatePageRequest(BaseModel):
    """
    What the client sends to update a page (the builder's save).
    Title, slug and category are checked by the route so failures are 400s.
    """

    model_config = {"extra": "forbid"}

    title: str = ""
    slug: str = ""
    type: Literal["leecms", "static"] = "leecms"
    page_category_id: int | None = None
    content_json: list[dict[str, Any]] = Field(default_factory=list)
    meta_title: str | None = Field(default=None, max_length=200)
    meta_description: str | None = Field(default=None, max_length=500)
    is_active: bool = True
    sort_order: int = 1


class PageResponse(BaseModel):
    """What the API returns for one page."""

    id: int
    title: str
    slug: str
    type: str
    content_json: list[dict[str, Any]]
    page_category_id: int | None
    category_name: str | None
    category_slug: str | None
    meta_title: str | None
    meta_description: str | None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, page: Page) -> PageResponse:
        """Convert internal Page model to public API response."""
        return cls(**page.model_dump())


class PageSummary(BaseModel):
    """Page listing entry (no content tree)."""

    id: int
    title: str
    slug: str
    type: str
    category_name: str | None
    is_active: bool
    sort_order: int
    updated_at: datetime

    @classmethod
    def from_model(cls, page: Page) -> PageSummary:
        return cls(
            id=page.id,
            title=page.title,
            slug=page.slug,
            type=page.type,
            category_name=page.category_name,
            is_active=page.is_active,
            sort_order=page.sort_order,
            updated_at=page.updated_at,
        )


class SitemapEntry(BaseModel):
    """One active page in the sitemap listing."""

    slug: str
    title: str
    lastModified: datetime


class DeletePageResponse(BaseModel):
    deleted: bool = True
    id: int


class RenderRequest(BaseModel):
    """A tree to render. Malformed trees render as empty."""

    model_config = {"extra": "forbid"}

    content_json: Any = Field(default_factory=list)
    mode: Literal["edit", "display"] = "display"


class ComponentFormRequest(BaseModel):
    """Current data of the instance open in the side panel; omitted keys use defaults."""

    model_config = {"extra": "forbid"}

    data: dict[str, Any] = Field(default_factory=dict)


class RenderResponse(BaseModel):
    html: str
