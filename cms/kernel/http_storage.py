"""
HttpPageStorage adapter for LeeCMS kernel assembly layer.

Implements the PageStorage protocol against the admin pages API:
    GET /api/admin/pages/{id}  → page record (content_json + metadata)
    PUT /api/admin/pages/{id}  → full page update

The PUT endpoint validates the whole record, so save() re-sends the page's
editable metadata alongside the new content tree. Metadata comes from the
last load() of that page, or from a fresh GET when there was none.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cms.kernel.assembly import PageNotFound, PageStorage, StorageError, parse_content_tree
from cms.kernel.types import PageFile

logger = logging.getLogger(__name__)

# Fields the PUT endpoint accepts besides content_json
EDITABLE_FIELDS = (
    "title",
    "slug",
    "type",
    "page_category_id",
    "meta_title",
    "meta_description",
    "is_active",
    "sort_order",
)


class HttpPageStorage(PageStorage):
    """Page storage over the admin HTTP API."""

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._metadata: dict[str, dict[str, Any]] = {}

    def _headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _url(self, identifier: str) -> str:
        return f"{self.api_url}/api/admin/pages/{identifier}"

    async def load(self, identifier: str) -> PageFile | None:
        """Fetch a page. Returns None on 404."""
        try:
            res = await self.client.get(self._url(identifier), headers=self._headers())
            if res.status_code == 404:
                return None
            res.raise_for_status()
            body = res.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StorageError(f"Failed to load page {identifier}: {e}") from e

        metadata = dict(body) if isinstance(body, dict) else {}
        raw = metadata.pop("content_json", None)
        self._metadata[identifier] = metadata
        return PageFile(identifier=identifier, content_tree=parse_content_tree(raw), metadata=metadata)

    async def save(self, identifier: str, tree: list[dict[str, Any]]) -> None:
        """PUT the page with its current metadata and the new content tree."""
        metadata = self._metadata.get(identifier)
        if metadata is None:
            page = await self.load(identifier)
            if page is None:
                raise PageNotFound(identifier)
            metadata = page.metadata

        payload = {k: metadata[k] for k in EDITABLE_FIELDS if k in metadata}
        payload["content_json"] = tree

        try:
            res = await self.client.put(self._url(identifier), json=payload, headers=self._headers())
            if res.status_code == 404:
                raise PageNotFound(identifier)
            res.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.warning("http_storage: save of page %s rejected: %s", identifier, detail)
            raise StorageError(f"Failed to save page {identifier}: {detail}") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to save page {identifier}: {e}") from e

    async def close(self) -> None:
        """Close client."""
        await self.client.aclose()


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {response.status_code}"
