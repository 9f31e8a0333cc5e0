"""
LeeCMS Kernel — Standard Component Catalog

The storefront's built-in component types. Each entry declares its editable
fields (with defaults) and a Mustache template; `prepare` hooks derive view
values such as CSS classes, embed URLs and sanitized HTML from raw data.

Templates see the prepared dict only. Raw HTML reaches output exclusively
through triple-stache keys produced by the sanitizer.
"""

from __future__ import annotations

import re
from typing import Any

from cms.kernel.sanitize import safe_url, sanitize_embed, sanitize_html
from cms.kernel.types import FieldKind, FieldSchema, RegistryEntry

# ---------------------------------------------------------------------------
# Shared option tables
# ---------------------------------------------------------------------------

ALIGN_OPTIONS = (("left", "Left"), ("center", "Center"), ("right", "Right"))
TEXT_ALIGN_OPTIONS = (*ALIGN_OPTIONS, ("justify", "Justify"))
FONT_SIZE_OPTIONS = (
    ("text-sm", "Small"),
    ("text-base", "Medium"),
    ("text-lg", "Large"),
    ("text-xl", "Extra Large"),
    ("text-2xl", "2X Large"),
)
BUTTON_STYLE_OPTIONS = (("primary", "Primary"), ("secondary", "Secondary"), ("outline", "Outline"))
BUTTON_SIZE_OPTIONS = (("sm", "Small"), ("md", "Medium"), ("lg", "Large"))

_ALIGN_CLASSES = {
    "left": "text-left",
    "center": "text-center",
    "right": "text-right",
    "justify": "text-justify",
}

_BUTTON_STYLE_CLASSES = {
    "primary": "btn-primary",
    "secondary": "btn-secondary",
    "outline": "btn-outline",
    "ghost": "btn-ghost",
    "danger": "btn-danger",
    "success": "btn-success",
}

_BUTTON_SIZE_CLASSES = {
    "sm": "px-3 py-2 text-sm",
    "md": "px-6 py-3 text-base",
    "lg": "px-8 py-4 text-lg",
    "xl": "px-10 py-5 text-xl",
}

_YOUTUBE_RE = re.compile(r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})")
_VIMEO_RE = re.compile(r"vimeo\.com/([0-9]+)")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_NUMBERED_LINE_RE = re.compile(r"<p[^>]*>(\d+)\s+([^<]+)</p>")


def _pick(table: dict[str, str], value: Any, default: str) -> str:
    return table.get(value, default) if isinstance(value, str) else default


def _align(value: Any) -> str:
    return _pick(_ALIGN_CLASSES, value, "text-left")


def _is_external(url: str) -> bool:
    return url.startswith(("http", "//"))


def _link_attrs(url: str, target: str = "_self") -> dict[str, Any]:
    target = "_blank" if _is_external(url) else target
    return {"target": target, "is_blank": target == "_blank"}


def video_embed_url(url: Any) -> str | None:
    """YouTube / Vimeo page URL → iframe URL; None when unrecognized."""
    if not isinstance(url, str) or not url:
        return None
    yt = _YOUTUBE_RE.search(url)
    if yt:
        return f"https://www.youtube.com/embed/{yt.group(1)}"
    vimeo = _VIMEO_RE.search(url)
    if vimeo:
        return f"https://player.vimeo.com/video/{vimeo.group(1)}"
    return None


def format_rich_text(text: Any) -> str:
    """Numbered-line and **bold** shorthand, then allowlist sanitize."""
    if not isinstance(text, str):
        return ""
    text = _NUMBERED_LINE_RE.sub(
        r'<div class="line-item"><span class="line-number">\1</span><span>\2</span></div>', text
    )
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    return sanitize_html(text)


# ---------------------------------------------------------------------------
# prepare hooks
# ---------------------------------------------------------------------------


def _prepare_text_block(data: dict[str, Any]) -> dict[str, Any]:
    return {
        **data,
        "align_class": _align(data.get("textAlign")),
        "size_class": data.get("fontSize") or "text-base",
        "content_html": format_rich_text(data.get("content", "")),
    }


def _prepare_image_block(data: dict[str, Any]) -> dict[str, Any]:
    return {
        **data,
        "src": data.get("imageUrl") or "/placeholder-image.svg",
        "alt": data.get("altText") or "Image",
        "align_class": _align(data.get("alignment")),
        "width_class": data.get("width") or "w-full",
    }


def _prepare_hero_section(data: dict[str, Any]) -> dict[str, Any]:
    return {
        **data,
        "align_class": _align(data.get("textAlignment")),
        "height_class": f"hero-{data.get('height') or 'medium'}",
        "show_secondary": bool(data.get("showSecondaryButton") and data.get("secondaryButtonText")),
        "primary_href": safe_url(data.get("primaryButtonLink")),
        "secondary_href": safe_url(data.get("secondaryButtonLink")),
    }


def _prepare_call_to_action(data: dict[str, Any]) -> dict[str, Any]:
    url = safe_url(data.get("linkUrl"))
    return {
        **data,
        **_link_attrs(url),
        "href": url,
        "align_class": _align(data.get("alignment")),
        "style_class": _pick(_BUTTON_STYLE_CLASSES, data.get("buttonStyle"), "btn-primary"),
        "size_class": _pick(_BUTTON_SIZE_CLASSES, data.get("buttonSize"), _BUTTON_SIZE_CLASSES["md"]),
    }


def _prepare_button_block(data: dict[str, Any]) -> dict[str, Any]:
    url = safe_url(data.get("url"))
    return {
        **data,
        **_link_attrs(url, str(data.get("target") or "_self")),
        "href": url,
        "align_class": _align(data.get("alignment")),
        "style_class": _pick(_BUTTON_STYLE_CLASSES, data.get("style"), "btn-primary"),
        "size_class": _pick(_BUTTON_SIZE_CLASSES, data.get("size"), _BUTTON_SIZE_CLASSES["md"]),
        "width_class": "w-full" if data.get("fullWidth") else "",
    }


def _prepare_video_embed(data: dict[str, Any]) -> dict[str, Any]:
    embed = video_embed_url(data.get("videoUrl"))
    aspect = {"16:9": "aspect-video", "4:3": "aspect-4-3", "1:1": "aspect-square"}
    return {
        **data,
        "embed_url": embed,
        "align_class": _align(data.get("alignment")),
        "aspect_class": _pick(aspect, data.get("aspectRatio"), "aspect-video"),
        "error_text": "Invalid video URL" if data.get("videoUrl") else "No video URL provided",
    }


def _prepare_html_embed(data: dict[str, Any]) -> dict[str, Any]:
    return {**data, "safe_html": sanitize_embed(data.get("htmlContent", ""))}


def _prepare_product_grid(data: dict[str, Any]) -> dict[str, Any]:
    return {
        **data,
        "source": f"/api/products?limit={data.get('count') or '8'}&type={data.get('displayType') or 'latest'}",
        "grid_class": f"grid-cols-{data.get('columns') or '4'}",
        "show_prices": "true" if data.get("showPrices") else "false",
    }


def _prepare_faq_section(data: dict[str, Any]) -> dict[str, Any]:
    faqs = data.get("faqs")
    items = [f for f in faqs if isinstance(f, dict)] if isinstance(faqs, list) else []
    return {**data, "items": items}


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

TEXT_BLOCK_TEMPLATE = (
    '<div class="cms-text-block {{align_class}} {{size_class}}">'
    "{{#title1}}<h2>{{.}}</h2>{{/title1}}"
    "{{#title2}}<h3>{{.}}</h3>{{/title2}}"
    '<div class="rich-text-content">{{{content_html}}}</div>'
    "</div>"
)

IMAGE_BLOCK_TEMPLATE = (
    '<figure class="cms-image-block {{align_class}}">'
    '<img class="{{width_class}}" src="{{src}}" alt="{{alt}}">'
    "{{#caption}}<figcaption>{{.}}</figcaption>{{/caption}}"
    "</figure>"
)

HERO_SECTION_TEMPLATE = (
    '<section class="cms-hero {{height_class}} {{align_class}}"'
    '{{#backgroundImage}} style="background-image: url(\'{{.}}\')"{{/backgroundImage}}>'
    "{{#title}}<h1>{{.}}</h1>{{/title}}"
    "{{#subtitle}}<h2>{{.}}</h2>{{/subtitle}}"
    "{{#description}}<p>{{.}}</p>{{/description}}"
    '<div class="cms-hero-actions">'
    '{{#primaryButtonText}}<a class="btn-primary" href="{{primary_href}}">{{.}}</a>'
    "{{/primaryButtonText}}"
    '{{#show_secondary}}<a class="btn-outline" href="{{secondary_href}}">{{secondaryButtonText}}</a>'
    "{{/show_secondary}}"
    "</div>"
    "</section>"
)

CALL_TO_ACTION_TEMPLATE = (
    '<div class="cms-cta {{align_class}}">'
    '<a class="btn {{style_class}} {{size_class}}" href="{{href}}" target="{{target}}"'
    '{{#is_blank}} rel="noopener noreferrer"{{/is_blank}}>{{buttonText}}</a>'
    "</div>"
)

BUTTON_BLOCK_TEMPLATE = (
    '<div class="cms-button-block {{align_class}}">'
    '<a class="btn {{style_class}} {{size_class}} {{width_class}}" href="{{href}}" target="{{target}}"'
    '{{#is_blank}} rel="noopener noreferrer"{{/is_blank}}>{{text}}</a>'
    "</div>"
)

VIDEO_EMBED_TEMPLATE = (
    '<div class="cms-video-embed {{align_class}}">'
    "{{#embed_url}}"
    '<div class="{{aspect_class}}"><iframe src="{{embed_url}}" title="Video" frameborder="0" '
    'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture" '
    "allowfullscreen></iframe></div>"
    "{{/embed_url}}"
    "{{^embed_url}}"
    '<div class="cms-video-missing">{{error_text}}<small>Supports YouTube and Vimeo URLs</small></div>'
    "{{/embed_url}}"
    "</div>"
)

HTML_EMBED_TEMPLATE = '<div class="cms-html-embed">{{{safe_html}}}</div>'

PRODUCT_GRID_TEMPLATE = (
    '<section class="cms-product-grid">'
    "{{#title}}<h2>{{.}}</h2>{{/title}}"
    '<div class="grid {{grid_class}}" data-source="{{source}}" data-show-prices="{{show_prices}}"></div>'
    "</section>"
)

FAQ_SECTION_TEMPLATE = (
    '<section class="cms-faq">'
    "{{#title}}<h2>{{.}}</h2>{{/title}}"
    "{{#subtitle}}<p>{{.}}</p>{{/subtitle}}"
    '{{#showSearch}}<input type="search" class="cms-faq-search" placeholder="Search questions">{{/showSearch}}'
    "{{#items}}<details><summary>{{question}}</summary><p>{{answer}}</p></details>{{/items}}"
    "</section>"
)

CONTACT_FORM_TEMPLATE = (
    '<section class="cms-contact-form">'
    "{{#title}}<h2>{{.}}</h2>{{/title}}"
    "{{#subtitle}}<p>{{.}}</p>{{/subtitle}}"
    "{{#instructionalText}}<p>{{.}}</p>{{/instructionalText}}"
    '<form method="post" action="/api/contact" enctype="multipart/form-data">'
    '<input type="text" name="name" required>'
    '<input type="email" name="email" required>'
    '{{#showOrderNumber}}<input type="text" name="orderNumber">{{/showOrderNumber}}'
    '<textarea name="message" required></textarea>'
    '<button type="submit">{{buttonText}}</button>'
    "</form>"
    "</section>"
)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _f(name: str, kind: FieldKind, default: Any, label: str = "", **kw: Any) -> FieldSchema:
    return FieldSchema(name=name, kind=kind, default=default, label=label, **kw)


_T, _TA, _S, _C, _A, _H = (
    FieldKind.TEXT,
    FieldKind.TEXTAREA,
    FieldKind.SELECT,
    FieldKind.CHECKBOX,
    FieldKind.ARRAY,
    FieldKind.HTML,
)

STANDARD_COMPONENTS: tuple[RegistryEntry, ...] = (
    RegistryEntry(
        type="text-block",
        display_name="Text Block",
        description="Rich text content with formatting options",
        icon="📝",
        category="Basic",
        fields=(
            _f("title1", _T, "", "Title 1"),
            _f("title2", _T, "", "Title 2"),
            _f("content", _H, "Enter your text content here...", "Content"),
            _f("textAlign", _S, "left", "Text Alignment", options=TEXT_ALIGN_OPTIONS),
            _f("fontSize", _S, "text-base", "Font Size", options=FONT_SIZE_OPTIONS),
        ),
        template=TEXT_BLOCK_TEMPLATE,
        prepare=_prepare_text_block,
    ),
    RegistryEntry(
        type="image-block",
        display_name="Image Block",
        description="Images with captions and styling",
        icon="🖼️",
        category="Basic",
        fields=(
            _f("imageUrl", _T, "", "Image URL"),
            _f("altText", _T, "", "Alt Text"),
            _f("caption", _T, "", "Caption"),
            _f("width", _S, "w-full", "Width", options=(
                ("w-1/4", "25%"), ("w-1/2", "50%"), ("w-3/4", "75%"), ("w-full", "100%"),
            )),
            _f("alignment", _S, "center", "Alignment", options=ALIGN_OPTIONS),
        ),
        template=IMAGE_BLOCK_TEMPLATE,
        prepare=_prepare_image_block,
    ),
    RegistryEntry(
        type="hero-section",
        display_name="Hero Section",
        description="Full-width hero banner with call-to-action",
        icon="🎯",
        category="Basic",
        fields=(
            _f("title", _T, "Your Headline Here", "Title"),
            _f("subtitle", _T, "", "Subtitle"),
            _f("description", _TA, "", "Description"),
            _f("backgroundImage", _T, "", "Background Image URL"),
            _f("primaryButtonText", _T, "Get Started", "Primary Button Text"),
            _f("primaryButtonLink", _T, "#", "Primary Button Link"),
            _f("showSecondaryButton", _C, False, "Show Secondary Button"),
            _f("secondaryButtonText", _T, "", "Secondary Button Text"),
            _f("secondaryButtonLink", _T, "#", "Secondary Button Link"),
            _f("textAlignment", _S, "center", "Text Alignment", options=ALIGN_OPTIONS),
            _f("height", _S, "medium", "Height", options=(
                ("small", "Small"), ("medium", "Medium"), ("large", "Large"),
            )),
        ),
        template=HERO_SECTION_TEMPLATE,
        prepare=_prepare_hero_section,
    ),
    RegistryEntry(
        type="call-to-action",
        display_name="Call to Action",
        description="Buttons and action elements",
        icon="🔘",
        category="Basic",
        fields=(
            _f("buttonText", _T, "Click Me", "Button Text"),
            _f("linkUrl", _T, "#", "Link URL"),
            _f("buttonStyle", _S, "primary", "Button Style", options=BUTTON_STYLE_OPTIONS),
            _f("buttonSize", _S, "md", "Button Size", options=BUTTON_SIZE_OPTIONS),
            _f("alignment", _S, "center", "Alignment", options=ALIGN_OPTIONS),
        ),
        template=CALL_TO_ACTION_TEMPLATE,
        prepare=_prepare_call_to_action,
    ),
    RegistryEntry(
        type="button-block",
        display_name="Button",
        description="Custom button with advanced styling",
        icon="🔗",
        category="Basic",
        fields=(
            _f("text", _T, "Button", "Text"),
            _f("url", _T, "#", "URL"),
            _f("style", _S, "primary", "Style", options=(
                *BUTTON_STYLE_OPTIONS, ("ghost", "Ghost"), ("danger", "Danger"), ("success", "Success"),
            )),
            _f("size", _S, "md", "Size", options=(*BUTTON_SIZE_OPTIONS, ("xl", "Extra Large"))),
            _f("alignment", _S, "center", "Alignment", options=ALIGN_OPTIONS),
            _f("target", _S, "_self", "Open In", options=(("_self", "Same Tab"), ("_blank", "New Tab"))),
            _f("fullWidth", _C, False, "Full Width"),
        ),
        template=BUTTON_BLOCK_TEMPLATE,
        prepare=_prepare_button_block,
    ),
    RegistryEntry(
        type="video-embed",
        display_name="Video Embed",
        description="YouTube and Vimeo videos",
        icon="📹",
        category="Media",
        fields=(
            _f("videoUrl", _T, "", "Video URL"),
            _f("aspectRatio", _S, "16:9", "Aspect Ratio", options=(
                ("16:9", "16:9"), ("4:3", "4:3"), ("1:1", "1:1"),
            )),
            _f("alignment", _S, "center", "Alignment", options=ALIGN_OPTIONS),
        ),
        template=VIDEO_EMBED_TEMPLATE,
        prepare=_prepare_video_embed,
    ),
    RegistryEntry(
        type="html-embed",
        display_name="HTML Embed",
        description="Custom HTML content",
        icon="💻",
        category="Advanced",
        fields=(_f("htmlContent", _H, "<div>Your HTML content here...</div>", "HTML Content"),),
        template=HTML_EMBED_TEMPLATE,
        prepare=_prepare_html_embed,
    ),
    RegistryEntry(
        type="product-grid",
        display_name="Product Grid",
        description="Dynamic product listings",
        icon="🛍️",
        category="E-commerce",
        fields=(
            _f("title", _T, "Featured Products", "Title"),
            _f("displayType", _S, "latest", "Display", options=(
                ("latest", "Latest"), ("featured", "Featured"), ("bestsellers", "Best Sellers"),
            )),
            _f("count", _S, "8", "Number of Products", options=(("4", "4"), ("8", "8"), ("12", "12"))),
            _f("columns", _S, "4", "Columns", options=(("2", "2"), ("3", "3"), ("4", "4"))),
            _f("showPrices", _C, True, "Show Prices"),
        ),
        template=PRODUCT_GRID_TEMPLATE,
        prepare=_prepare_product_grid,
    ),
    RegistryEntry(
        type="faq-section",
        display_name="FAQ Section",
        description="Collapsible frequently asked questions",
        icon="❓",
        category="Content",
        fields=(
            _f("title", _T, "Frequently Asked Questions", "Title"),
            _f("subtitle", _T, "Find answers to common questions", "Subtitle"),
            _f(
                "faqs",
                _A,
                [
                    {
                        "question": "How do I create an account?",
                        "answer": 'You can create an account by clicking the "Sign Up" button '
                        "and following the registration process.",
                    },
                    {
                        "question": "What payment methods do you accept?",
                        "answer": "We accept all major credit cards, PayPal, and various digital payment methods.",
                    },
                    {
                        "question": "How long does delivery take?",
                        "answer": "Digital products are delivered instantly after payment confirmation.",
                    },
                ],
                "Questions",
                fields=(_f("question", _T, "", "Question"), _f("answer", _TA, "", "Answer")),
            ),
            _f("showSearch", _C, True, "Show Search"),
        ),
        template=FAQ_SECTION_TEMPLATE,
        prepare=_prepare_faq_section,
    ),
    RegistryEntry(
        type="contact-form",
        display_name="Contact Form",
        description="Professional contact form with file uploads",
        icon="📧",
        category="Content",
        fields=(
            _f("title", _T, "Contact Us", "Title"),
            _f("subtitle", _T, "Get in touch with our support team", "Subtitle"),
            _f(
                "instructionalText",
                _TA,
                "Please fill out the form below and we'll get back to you as soon as possible.",
                "Instructions",
            ),
            _f("buttonText", _T, "Send Message", "Button Text"),
            _f("showOrderNumber", _C, True, "Ask for Order Number"),
        ),
        template=CONTACT_FORM_TEMPLATE,
    ),
)
