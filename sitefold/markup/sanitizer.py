"""Allowlist-based HTML sanitization built on BeautifulSoup.

Tags outside :data:`ALLOWED_TAGS` are unwrapped (their text survives), tags in
:data:`DROP_WITH_CONTENT` are removed along with everything inside them, and
every surviving tag keeps only the attributes listed for it. URL-bearing
attributes must use an allowed scheme. As a last step any ``javascript:`` or
``vbscript:`` substring is removed from the output, wherever it appears.
"""

from __future__ import annotations

import re
import typing as typ

from bs4 import BeautifulSoup, Tag
from bs4.element import PreformattedString

from sitefold._constants import CALLOUT_TYPES

BASELINE_TAGS = frozenset(
    {
        "address", "article", "aside", "footer", "header", "h1", "h2", "h3",
        "h4", "h5", "h6", "hgroup", "main", "nav", "section", "blockquote",
        "dd", "div", "dl", "dt", "figcaption", "figure", "hr", "li", "ol",
        "p", "pre", "ul", "a", "abbr", "b", "bdi", "bdo", "br", "cite",
        "code", "data", "dfn", "em", "i", "kbd", "mark", "q", "rb", "rp",
        "rt", "rtc", "ruby", "s", "samp", "small", "span", "strong", "sub",
        "sup", "time", "u", "var", "wbr", "caption", "col", "colgroup",
        "table", "tbody", "td", "tfoot", "th", "thead", "tr",
    }
)  # fmt: skip
ALLOWED_TAGS = BASELINE_TAGS | {
    "img",
    "iframe",
    "video",
    "source",
    "svg",
    "path",
}
DROP_WITH_CONTENT = frozenset({"script", "style", "textarea", "option", "noscript"})

ALLOWED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "name", "target", "rel", "title"}),
    "img": frozenset({"src", "alt", "title", "loading"}),
    "code": frozenset({"class"}),
    "pre": frozenset({"class"}),
    "span": frozenset({"class", "style"}),
    "p": frozenset({"class"}),
    "div": frozenset({"class", "data-language"}),
    "iframe": frozenset({"src", "frameborder", "allow", "allowfullscreen", "loading"}),
    "video": frozenset(
        {
            "src", "controls", "width", "height", "autoplay", "loop", "muted",
            "preload", "poster",
        }
    ),  # fmt: skip
    "source": frozenset({"src", "type"}),
    "svg": frozenset(
        {"class", "viewbox", "width", "height", "aria-hidden", "fill", "xmlns"}
    ),
    "path": frozenset({"d", "fill", "fill-rule", "stroke", "stroke-width"}),
}

# ``None`` allows any class on the tag; tags missing here keep no classes.
ALLOWED_CLASSES: dict[str, frozenset[str] | None] = {
    "code": None,
    "pre": None,
    "span": None,
    "svg": None,
    "div": frozenset(
        {
            "codehilite",
            "video-container",
            "markdown-alert",
            *(f"markdown-alert-{kind}" for kind in CALLOUT_TYPES),
        }
    ),
    "p": frozenset({"markdown-alert-title"}),
}

URL_ATTRIBUTES = frozenset({"href", "src", "cite", "poster"})
ALLOWED_SCHEMES = frozenset({"http", "https", "ftp", "mailto", "tel"})
SCHEME_PATTERN = re.compile(r"^([a-z][a-z0-9+.\-]*):")
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x20\x7f]+")
SCRIPT_PROTOCOL_PATTERN = re.compile(r"javascript:|vbscript:", re.IGNORECASE)


def is_safe_url(value: str) -> bool:
    """Return True when ``value`` is relative or uses an allowed scheme."""
    compact = CONTROL_CHARS_PATTERN.sub("", value).lower()
    match = SCHEME_PATTERN.match(compact)
    return match is None or match.group(1) in ALLOWED_SCHEMES


def _filter_classes(tag_name: str, value: typ.Any) -> list[str]:
    classes = value.split() if isinstance(value, str) else list(value)
    if tag_name not in ALLOWED_CLASSES:
        return []
    allowed = ALLOWED_CLASSES[tag_name]
    if allowed is None:
        return classes
    return [name for name in classes if name in allowed]


def _clean_attributes(tag: Tag) -> None:
    allowed = ALLOWED_ATTRIBUTES.get(tag.name, frozenset())
    for name, value in list(tag.attrs.items()):
        keep = name.lower() in allowed
        if keep and name in URL_ATTRIBUTES:
            keep = is_safe_url(str(value))
        if keep and name == "class":
            classes = _filter_classes(tag.name, value)
            if classes:
                tag[name] = classes
            keep = bool(classes)
        if not keep:
            del tag[name]


def _clean_children(node: Tag) -> None:
    for child in list(node.children):
        if isinstance(child, Tag):
            if child.name in DROP_WITH_CONTENT:
                child.decompose()
                continue
            _clean_children(child)
            if child.name in ALLOWED_TAGS:
                _clean_attributes(child)
            else:
                child.unwrap()
        elif isinstance(child, PreformattedString):
            child.extract()


def strip_script_protocols(markup: str) -> str:
    """Remove ``javascript:``/``vbscript:`` substrings until none remain."""
    previous = None
    while previous != markup:
        previous = markup
        markup = SCRIPT_PROTOCOL_PATTERN.sub("", markup)
    return markup


def sanitize_html(markup: str) -> str:
    """Return ``markup`` reduced to the allowlisted tags and attributes."""
    soup = BeautifulSoup(markup, "html.parser")
    _clean_children(soup)
    return strip_script_protocols(str(soup))


__all__ = [
    "ALLOWED_ATTRIBUTES",
    "ALLOWED_CLASSES",
    "ALLOWED_TAGS",
    "is_safe_url",
    "sanitize_html",
    "strip_script_protocols",
]
