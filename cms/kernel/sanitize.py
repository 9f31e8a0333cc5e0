"""
Allowlist HTML sanitizer for rich-text and embed fields.

Tags outside the allowlist are dropped (their text is kept); attributes
outside the allowlist are dropped; `javascript:` URLs are removed. Content of
<script> and <style> is discarded entirely.
"""

from __future__ import annotations

import re
from html import escape
from html.parser import HTMLParser
from typing import Any

RICH_TEXT_TAGS = frozenset({
    "div", "span", "p", "br", "strong", "em", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "a", "blockquote",
})
RICH_TEXT_ATTRS = frozenset({"class", "href", "target"})

EMBED_TAGS = RICH_TEXT_TAGS | frozenset({
    "u", "b", "i", "hr", "code", "pre", "img", "video", "audio", "iframe",
    "table", "thead", "tbody", "tr", "th", "td",
})
EMBED_ATTRS = frozenset({
    "class", "id", "style", "href", "src", "alt", "width", "height",
    "target", "rel", "title", "colspan", "rowspan",
})

_VOID_TAGS = frozenset({"br", "hr", "img"})
_DROP_CONTENT = frozenset({"script", "style"})
_URL_ATTRS = frozenset({"href", "src"})
_BLOCKED_SCHEMES = ("javascript:", "vbscript:", "data:text")
# Browsers ignore control chars and whitespace inside a scheme
_SCHEME_NOISE_RE = re.compile(r"[\x00-\x20]")


def is_unsafe_url(value: str) -> bool:
    return _SCHEME_NOISE_RE.sub("", value).lower().startswith(_BLOCKED_SCHEMES)


def safe_url(value: Any, default: str = "#") -> str:
    """`value` as a link target, or `default` when empty or script-bearing."""
    if not isinstance(value, str) or not value or is_unsafe_url(value):
        return default
    return value


class _Sanitizer(HTMLParser):
    def __init__(self, tags: frozenset[str], attrs: frozenset[str]) -> None:
        super().__init__(convert_charrefs=True)
        self.tags = tags
        self.attrs = attrs
        self.out: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROP_CONTENT:
            self._skip_depth += 1
            return
        if self._skip_depth or tag not in self.tags:
            return
        kept = []
        for name, value in attrs:
            if name not in self.attrs or value is None:
                continue
            if name in _URL_ATTRS and is_unsafe_url(value):
                continue
            kept.append(f' {name}="{escape(value, quote=True)}"')
        self.out.append(f"<{tag}{''.join(kept)}>")

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_CONTENT:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if self._skip_depth or tag not in self.tags or tag in _VOID_TAGS:
            return
        self.out.append(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.out.append(escape(data, quote=False))


def sanitize_html(
    html: str,
    tags: frozenset[str] = RICH_TEXT_TAGS,
    attrs: frozenset[str] = RICH_TEXT_ATTRS,
) -> str:
    if not isinstance(html, str) or not html:
        return ""
    parser = _Sanitizer(tags, attrs)
    parser.feed(html)
    parser.close()
    return "".join(parser.out)


def sanitize_embed(html: str) -> str:
    """Looser allowlist for the html-embed component."""
    return sanitize_html(html, EMBED_TAGS, EMBED_ATTRS)
